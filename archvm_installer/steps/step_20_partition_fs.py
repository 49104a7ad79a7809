from __future__ import annotations

import logging
from typing import Any, Dict

from .. import console
from ..lib.firmware import boot_mode_from_state
from ..lib.storage import PartitionPlan, format_partitions, partition_disk
from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)


class PartitionFilesystemStep:
    step_id = "20_partition_fs"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = ctx.cfg
        exe = state.setdefault("execution", {})

        disk = (exe.get("decisions") or {}).get("disk")
        if not disk:
            raise RuntimeError("execution.decisions.disk is required for partitioning")

        boot_mode = boot_mode_from_state(state)

        plan = PartitionPlan(
            disk=disk,
            boot_mode=boot_mode,
            root_fs=cfg.filesystem,
            esp_size_mib=cfg.esp_size_mib,
        )

        console.step("Partitioning disk")
        layout = partition_disk(plan, dry_run=ctx.dry_run)

        if layout.esp_part:
            console.step("Formatting EFI partition")
        console.step(f"Formatting root partition with {cfg.filesystem}")
        format_partitions(layout, root_fs=cfg.filesystem, dry_run=ctx.dry_run)

        mounts = exe.setdefault("mounts", {})
        mounts["root_part"] = layout.root_part
        mounts["esp_part"] = layout.esp_part

        logger.info("Partitioned %s root=%s esp=%s", disk, layout.root_part, layout.esp_part)
        return state
