from __future__ import annotations

import logging
from pathlib import Path

from .command import run_cmd

logger = logging.getLogger(__name__)

_HEADER = "# Static information about the filesystems.\n# Generated by archvm-installer from genfstab -U.\n\n"


def generate_fstab(target_root: str, *, dry_run: bool = False) -> str:
    """Return fstab text for everything currently mounted under target_root (by UUID)."""

    r = run_cmd(["genfstab", "-U", target_root], dry_run=dry_run)
    return r.stdout


def write_fstab(target_root: str, contents: str, *, dry_run: bool = False) -> Path:
    """Replace target's /etc/fstab; running twice yields the same file."""

    p = Path(target_root) / "etc/fstab"
    if dry_run:
        logger.info("Would write %s", str(p))
        return p
    if not contents.strip():
        raise RuntimeError(f"genfstab produced no entries for {target_root}; is it mounted?")
    p.parent.mkdir(parents=True, exist_ok=True)
    body = contents if contents.endswith("\n") else contents + "\n"
    p.write_text(_HEADER + body, encoding="utf-8")
    return p
