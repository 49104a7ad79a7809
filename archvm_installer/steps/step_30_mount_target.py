from __future__ import annotations

import logging
from typing import Any, Dict

from .. import console
from ..lib.devices import PartitionLayout
from ..lib.env import PATHS
from ..lib.storage import mount_target
from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)


class MountTargetStep:
    step_id = "30_mount_target"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        exe = state.setdefault("execution", {})
        mounts = exe.setdefault("mounts", {})
        disk = (exe.get("decisions") or {}).get("disk")
        root_part = mounts.get("root_part")
        if not disk or not root_part:
            raise RuntimeError("Missing disk/root_part; run partition step first")

        layout = PartitionLayout(disk=disk, root_part=root_part, esp_part=mounts.get("esp_part"))
        target_root = ctx.cfg.target_root

        console.step("Mounting partitions")
        mount_target(layout, target_root, esp_mountpoint=PATHS.esp_mountpoint, dry_run=ctx.dry_run)

        mounts["target_root"] = target_root
        logger.info("Mounted target_root=%s", target_root)
        return state
