from __future__ import annotations

import logging

from .command import run_cmd

logger = logging.getLogger(__name__)


def is_online(host: str, *, dry_run: bool = False) -> bool:
    """Single ping to host; no retries."""

    r = run_cmd(["ping", "-c", "1", host], check=False, dry_run=dry_run)
    if r.returncode != 0:
        logger.info("ping %s failed (%s)", host, r.returncode)
    return r.returncode == 0


def enable_ntp(*, dry_run: bool = False) -> None:
    run_cmd(["timedatectl", "set-ntp", "true"], dry_run=dry_run)
