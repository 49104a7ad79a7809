from __future__ import annotations

import logging
import os
import stat

from .command import run_cmd

logger = logging.getLogger(__name__)


def is_block_device(path: str) -> bool:
    try:
        return stat.S_ISBLK(os.stat(path).st_mode)
    except OSError:
        return False


def list_disks(*, dry_run: bool = False) -> str:
    """Return the human-readable lsblk table shown before disk selection."""

    r = run_cmd(["lsblk", "-o", "NAME,SIZE,TYPE,MOUNTPOINTS"], dry_run=dry_run)
    return r.stdout


def resolve_disk(answer: str, prefix: str) -> str:
    """Turn an operator answer (``vda`` or ``/dev/vda``) into a device path."""

    value = answer.strip()
    if not value:
        raise ValueError("No disk given")
    if value.startswith(prefix):
        return value
    if "/" in value:
        raise ValueError(f"Unexpected disk name {value!r}; give a name like sda or vda")
    return prefix + value
