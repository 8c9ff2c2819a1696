from __future__ import annotations

import argparse
import logging
from typing import Any, Dict, Optional

from . import __version__
from .config import InstallerConfig, default_log_path, load_config
from .context import InstallCtx, build_context
from .errors import FatalError
from .lib.command import CommandError
from .lib.status import StatusReporter
from .logging_utils import configure_logging
from .pipeline import PipelineResult, run_pipeline
from .steps import (
    CheckHostStep,
    CheckPrivilegesStep,
    EntropyDaemonStep,
    InstallPrerequisitesStep,
    InstallRuntimeStep,
    ManageUsersStep,
    RemoveConflictsStep,
    SetupRepositoryStep,
    VerifyInstallationStep,
)

logger = logging.getLogger(__name__)

BANNER = (
    "========================================",
    "Docker Installation for Ubuntu",
    "Supports: 22.04 LTS, 24.04 LTS, 24.10",
    "========================================",
)


def build_steps():
    return [
        CheckPrivilegesStep(),
        CheckHostStep(),
        RemoveConflictsStep(),
        InstallPrerequisitesStep(),
        SetupRepositoryStep(),
        InstallRuntimeStep(),
        EntropyDaemonStep(),
        ManageUsersStep(),
        VerifyInstallationStep(),
    ]


def _print_next_steps(ctx: InstallCtx) -> None:
    r = ctx.reporter
    r.line()
    r.ok("Docker installation completed successfully!")
    r.line()
    r.line("Next steps:")
    r.line(f"  1. Users added to {ctx.cfg.docker_group} group need to log out and back in")
    r.line("  2. Test installation: sudo docker run hello-world")
    r.line("  3. Test Docker Compose: docker compose version")
    r.line()


def run(cfg: InstallerConfig, ctx: Optional[InstallCtx] = None) -> PipelineResult:
    """Run the provisioning pipeline once. Raises FatalError on a fatal step."""

    ctx = ctx or build_context(cfg)
    state: Dict[str, Any] = {"version": __version__, "execution": {"dry_run": ctx.cfg.dry_run}}

    for line in BANNER:
        ctx.reporter.line(line)
    ctx.reporter.line()
    logger.info("Starting Docker installation")

    result = run_pipeline(ctx=ctx, state=state, steps=build_steps())
    _print_next_steps(ctx)
    logger.info(
        "Docker installation completed (ran=%s already=%s skipped=%s warned=%s)",
        ",".join(result.by_status("ran")),
        ",".join(result.by_status("already")),
        ",".join(result.by_status("skipped")),
        ",".join(result.by_status("warned")),
    )
    return result


def cleanup(ctx: Optional[InstallCtx]) -> None:
    logger.info("Cleaning up")
    if ctx is not None:
        ctx.prompter.close()


def main(argv: Optional[list[str]] = None, *, ctx: Optional[InstallCtx] = None) -> int:
    p = argparse.ArgumentParser(
        prog="docker-installer",
        description="Install Docker Engine and the Compose plugin on Ubuntu.",
    )
    p.add_argument("--config", default=None, help="Optional YAML file overriding installer defaults")
    p.add_argument("--log", default=None, help="Path to the run log (default: /tmp/<program>.log)")
    p.add_argument("--dry-run", action="store_true", help="Log mutating commands instead of running them")
    p.add_argument("--no-color", action="store_true", help="Plain status output")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    args = p.parse_args(argv)

    try:
        try:
            cfg = load_config(
                args.config,
                log_path=args.log,
                dry_run=True if args.dry_run else None,
                color=False if args.no_color else None,
            )
        except (OSError, ValueError) as e:
            configure_logging(log_path=args.log or default_log_path())
            reporter = ctx.reporter if ctx is not None else StatusReporter(color=not args.no_color)
            reporter.error(f"Invalid installer config {args.config}: {e}")
            return 1
        configure_logging(log_path=cfg.log_path)

        ctx = ctx or build_context(cfg)
        run(cfg, ctx)
        return 0
    except FatalError as e:
        logger.error("Installer aborted: %s", e)
        return 1
    except KeyboardInterrupt:
        logger.error("Interrupted")
        return 130
    except Exception as e:
        logger.exception("Installer failed")
        if isinstance(e, CommandError) and e.returncode:
            return e.returncode
        return 1
    finally:
        cleanup(ctx)


if __name__ == "__main__":
    raise SystemExit(main())
