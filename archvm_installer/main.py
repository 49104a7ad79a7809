from __future__ import annotations

import argparse
import logging
from typing import Any, Dict, List, Optional

from . import console
from .config import InstallConfig, load_config
from .errors import ConfigError, OperatorDeclined
from .lib.command import CommandError
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import InstallCtx, PipelineResult, Step, run_pipeline
from .state_store import new_state, save_state
from .steps import (
    ConfigurationPhaseError,
    ConfigureSystemStep,
    FinalizeRebootStep,
    InstallBaseStep,
    MountTargetStep,
    PartitionFilesystemStep,
    PreflightStep,
    SelectDiskStep,
    WriteFstabStep,
)

logger = logging.getLogger(__name__)


def build_steps() -> List[Step]:
    return [
        PreflightStep(),
        SelectDiskStep(),
        PartitionFilesystemStep(),
        MountTargetStep(),
        InstallBaseStep(),
        WriteFstabStep(),
        ConfigureSystemStep(),
        FinalizeRebootStep(),
    ]


def exit_code_for(error: Optional[BaseException]) -> int:
    """Map a step error to the process exit status.

    A failing tool's own status is passed through, like a shell under set -e.
    """

    if error is None:
        return 0
    if isinstance(error, ConfigurationPhaseError):
        return exit_code_for(error.cause)
    if isinstance(error, CommandError) and error.returncode > 0:
        return error.returncode
    return 1


def collect_passwords(cfg: InstallConfig) -> InstallConfig:
    """Prompt for any password the config file left out."""

    root_password = None
    user_password = None
    if not cfg.root_password:
        root_password = _ask_password("root")
    if not cfg.user_password:
        user_password = _ask_password(cfg.username)
    return cfg.with_passwords(root_password=root_password, user_password=user_password)


def _ask_password(user: str) -> str:
    try:
        first = console.ask_secret(f"Password for {user}: ")
        second = console.ask_secret(f"Repeat password for {user}: ")
    except EOFError as e:
        raise ConfigError(f"No password given for {user} (stdin closed)") from e
    if first != second:
        raise ConfigError(f"Passwords for {user} do not match")
    return first


def run(
    *,
    cfg: InstallConfig,
    dry_run: bool = False,
    report_path: Optional[str] = None,
    steps: Optional[List[Step]] = None,
) -> PipelineResult:
    """Run the installer steps in order, stopping at the first failure."""

    ctx = InstallCtx(cfg=cfg, dry_run=dry_run)
    state: Dict[str, Any] = new_state()
    state["config"] = cfg.to_dict(redact=True)
    state["dry_run"] = dry_run

    result = run_pipeline(ctx=ctx, state=state, steps=build_steps() if steps is None else steps)
    state = result.state

    exe = state.setdefault("execution", {})
    summary = exe.setdefault("summary", {})
    summary["completed_steps"] = result.completed_steps
    summary["failed_step"] = result.failed_step
    if result.error is not None:
        exe.setdefault("errors", []).append({"step": result.failed_step, "error": str(result.error)})

    if report_path:
        save_state(report_path, state)
    return result


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(
        prog="archvm-install",
        description="Unattended Arch Linux + KDE Plasma install onto a VM disk",
    )
    p.add_argument("--config", default=None, help="Installer config (YAML); defaults are used when omitted")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to installer log")
    p.add_argument("--report", default=None, help="Write a run report here (json|yaml)")
    p.add_argument("--dry-run", action="store_true", help="Log commands without running them")
    p.add_argument("--debug", action="store_true", help="Verbose logging, also to the console")
    p.add_argument("--no-color", action="store_true", help="Disable colored console output")

    args = p.parse_args(argv)

    console.set_color(not args.no_color)
    configure_logging(
        log_path=args.log,
        level=logging.DEBUG if args.debug else logging.INFO,
        also_console=bool(args.debug),
    )

    try:
        cfg = collect_passwords(load_config(args.config)).validate()
        result = run(cfg=cfg, dry_run=bool(args.dry_run), report_path=args.report)
    except ConfigError as e:
        console.error(str(e))
        return 1
    except KeyboardInterrupt:
        console.error("Operation cancelled by user")
        return 130

    if result.ok:
        return 0

    if isinstance(result.error, OperatorDeclined):
        # Same as the decline in the old script: quiet exit, nothing touched.
        logger.info("%s", result.error)
    else:
        console.error(str(result.error))
    return exit_code_for(result.error)
