"""Docker Engine installer for Ubuntu hosts (Python-first, step-driven).

Core design goals:
- Idempotent steps (observe before acting)
- Safe to run piped from a remote fetch
- Entropy daemon only where virtualization calls for it
- Centralized logging
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
