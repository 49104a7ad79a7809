from __future__ import annotations

import logging
import shlex
from pathlib import Path
from typing import Optional, Sequence

from .command import CmdResult, run_cmd

logger = logging.getLogger(__name__)


def chroot_cmd(
    target_root: str,
    argv: Sequence[str],
    *,
    input_text: Optional[str] = None,
    redact_input: bool = False,
    dry_run: bool = False,
) -> CmdResult:
    """Run a command inside target root.

    arch-chroot sets up /dev, /proc, /sys and resolv.conf itself and tears
    them down when the command exits, so each call is self-contained.
    """

    return run_cmd(
        ["arch-chroot", target_root, *argv],
        input_text=input_text,
        redact_input=redact_input,
        dry_run=dry_run,
    )


def chroot_as_user(target_root: str, user: str, script: str, *, dry_run: bool = False) -> CmdResult:
    """Run a shell snippet inside target root as an unprivileged user with a login HOME."""

    return chroot_cmd(target_root, ["sudo", "-u", user, "-H", "bash", "-c", script], dry_run=dry_run)


def set_password(target_root: str, user: str, password: str, *, dry_run: bool = False) -> None:
    # Passwords go through stdin so they never show up in argv or logs.
    chroot_cmd(
        target_root,
        ["chpasswd"],
        input_text=f"{user}:{password}\n",
        redact_input=True,
        dry_run=dry_run,
    )


def write_file(root: str, rel: str, contents: str, *, mode: Optional[int] = None, dry_run: bool = False) -> Path:
    """Write (replace) a file below root."""

    p = Path(root) / rel.lstrip("/")
    if dry_run:
        logger.info("Would write %s", str(p))
        return p
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(contents, encoding="utf-8")
    if mode is not None:
        p.chmod(mode)
    logger.info("Wrote %s", str(p))
    return p


def remove_file(root: str, rel: str, *, dry_run: bool = False) -> None:
    p = Path(root) / rel.lstrip("/")
    if dry_run:
        logger.info("Would remove %s", str(p))
        return
    p.unlink(missing_ok=True)


def quote(*words: str) -> str:
    return " ".join(shlex.quote(w) for w in words)
