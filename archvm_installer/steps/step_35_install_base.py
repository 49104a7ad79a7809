from __future__ import annotations

import logging
from typing import Any, Dict

from .. import console
from ..lib.pkg import pacstrap
from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)


class InstallBaseStep:
    step_id = "35_install_base"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        mounts = (state.get("execution") or {}).get("mounts") or {}
        target_root = mounts.get("target_root")
        if not target_root:
            raise RuntimeError("execution.mounts.target_root missing; run mount step first")

        console.section("Installing base system")
        pacstrap(target_root, ctx.cfg.base_packages, dry_run=ctx.dry_run)

        logger.info("Base system installed at %s", target_root)
        return state
