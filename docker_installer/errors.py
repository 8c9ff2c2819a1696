from __future__ import annotations


class InstallerError(RuntimeError):
    """Base class for installer failures."""


class FatalError(InstallerError):
    """Aborts the remaining steps; the run exits non-zero."""


class NotSupportedOS(FatalError):
    pass
