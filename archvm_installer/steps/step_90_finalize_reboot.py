from __future__ import annotations

import logging
from typing import Any, Dict

from .. import console
from ..lib.command import run_cmd
from ..lib.storage import unmount_target
from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)


class FinalizeRebootStep:
    step_id = "90_finalize_reboot"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = ctx.cfg
        mounts = (state.get("execution") or {}).get("mounts") or {}
        target_root = mounts.get("target_root") or cfg.target_root

        console.section("Installation completed successfully!")
        console.step("You can now reboot into your new Arch Linux system")
        console.step("Login credentials:")
        console.step(f"Username: {cfg.username}")
        console.step("Password: (as configured)")
        console.step("IMPORTANT: Please change these passwords after logging in if they were shared")

        decisions = state.setdefault("execution", {}).setdefault("decisions", {})
        if console.confirm("Would you like to reboot now?"):
            decisions["reboot"] = True
            console.step("Rebooting...")
            unmount_target(target_root, dry_run=ctx.dry_run)
            run_cmd(["sync"], dry_run=ctx.dry_run)
            run_cmd(["reboot"], dry_run=ctx.dry_run)
        else:
            decisions["reboot"] = False
            console.step("You can reboot manually when ready")

        return state
