from __future__ import annotations

import logging
from typing import Any, Dict

from .. import console
from ..lib.fstab import generate_fstab, write_fstab
from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)


class WriteFstabStep:
    step_id = "40_write_fstab"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        mounts = (state.get("execution") or {}).get("mounts") or {}
        target_root = mounts.get("target_root")
        if not target_root:
            raise RuntimeError("execution.mounts.target_root missing; run mount step first")

        console.step("Generating fstab")
        contents = generate_fstab(target_root, dry_run=ctx.dry_run)
        path = write_fstab(target_root, contents, dry_run=ctx.dry_run)

        logger.info("Wrote %s", str(path))
        return state
