from __future__ import annotations

import logging
import os
import shutil
from typing import Any, Dict

from .. import console
from ..errors import PreflightError
from ..lib.env import PATHS
from ..lib.firmware import detect_boot_mode
from ..lib.net import enable_ntp, is_online
from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)

REQUIRED_TOOLS = ["lsblk", "parted", "mkfs.fat", "pacstrap", "genfstab", "arch-chroot"]


class PreflightStep:
    step_id = "10_preflight"

    efivars_path = PATHS.efivars

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = ctx.cfg

        if os.geteuid() != 0:
            if not ctx.dry_run:
                raise PreflightError("This script must be run as root")
            logger.info("Not root; continuing because of dry run")

        tools = REQUIRED_TOOLS + [f"mkfs.{cfg.filesystem}"]
        missing = [t for t in tools if shutil.which(t) is None]
        if missing:
            if not ctx.dry_run:
                raise PreflightError(f"Missing required tools: {', '.join(missing)}")
            logger.info("Missing tools (ignored in dry run): %s", ", ".join(missing))

        boot_mode = detect_boot_mode(self.efivars_path)
        state.setdefault("host", {})["boot_mode"] = boot_mode.value
        console.section(f"Starting Arch Linux installation in {boot_mode.value} mode")

        if not is_online(cfg.connectivity_host, dry_run=ctx.dry_run):
            raise PreflightError("No internet connection. Please connect and try again.")

        console.step("Setting up system clock")
        enable_ntp(dry_run=ctx.dry_run)
        return state
