from __future__ import annotations

import logging
from typing import Any, Dict

from .. import console
from ..errors import OperatorDeclined, PreflightError
from ..lib.block import is_block_device, list_disks, resolve_disk
from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)


class SelectDiskStep:
    """Ask which disk to wipe; the only gate before irreversible changes."""

    step_id = "15_select_disk"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = ctx.cfg

        console.section("Disk Setup")
        console.echo("Available disks:")
        console.echo(list_disks(dry_run=ctx.dry_run).rstrip())

        answer = console.ask("Enter the disk to install Arch Linux on (e.g., sda, vda): ")
        try:
            disk = resolve_disk(answer, cfg.device_prefix)
        except ValueError as e:
            raise PreflightError(str(e)) from e

        if not is_block_device(disk):
            if not ctx.dry_run:
                raise PreflightError(f"Disk {disk} does not exist")
            logger.info("%s is not a block device; continuing because of dry run", disk)

        console.step(f"Selected disk: {disk}")
        if not console.confirm(f"WARNING: All data on {disk} will be erased. Continue?"):
            raise OperatorDeclined(f"Installation to {disk} declined")

        state.setdefault("execution", {}).setdefault("decisions", {})["disk"] = disk
        return state
