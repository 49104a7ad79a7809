from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .command import run_cmd
from .devices import PartitionLayout, derive_layout
from .firmware import BootMode

logger = logging.getLogger(__name__)

# Partitions start at 1MiB for alignment.
_START_MIB = 1

# These refuse to overwrite an existing filesystem signature without -f.
_MKFS_FORCE = {"btrfs": ["-f"], "xfs": ["-f"]}


@dataclass(frozen=True)
class PartitionPlan:
    disk: str
    boot_mode: BootMode
    root_fs: str = "ext4"
    esp_size_mib: int = 512

    @property
    def esp_end_mib(self) -> int:
        return _START_MIB + self.esp_size_mib


def _parted(disk: str, *args: str, dry_run: bool) -> None:
    run_cmd(["parted", "-s", disk, *args], dry_run=dry_run)


def partition_disk(plan: PartitionPlan, *, dry_run: bool = False) -> PartitionLayout:
    """Write a fresh partition table for plan.

    Layout:
    - UEFI: GPT, ESP (FAT32, esp flag) then root filling the disk
    - BIOS: msdos, one bootable primary root partition filling the disk
    """

    disk = plan.disk
    logger.info("Partitioning disk=%s boot_mode=%s", disk, plan.boot_mode.value)

    if plan.boot_mode is BootMode.UEFI:
        _parted(disk, "mklabel", "gpt", dry_run=dry_run)
        _parted(disk, "mkpart", "EFI", "fat32", f"{_START_MIB}MiB", f"{plan.esp_end_mib}MiB", dry_run=dry_run)
        _parted(disk, "set", "1", "esp", "on", dry_run=dry_run)
        _parted(disk, "mkpart", "root", plan.root_fs, f"{plan.esp_end_mib}MiB", "100%", dry_run=dry_run)
    else:
        _parted(disk, "mklabel", "msdos", dry_run=dry_run)
        _parted(disk, "mkpart", "primary", plan.root_fs, f"{_START_MIB}MiB", "100%", dry_run=dry_run)
        _parted(disk, "set", "1", "boot", "on", dry_run=dry_run)

    return derive_layout(disk, uefi=plan.boot_mode is BootMode.UEFI)


def format_partitions(layout: PartitionLayout, *, root_fs: str = "ext4", dry_run: bool = False) -> None:
    if layout.esp_part:
        run_cmd(["mkfs.fat", "-F32", layout.esp_part], dry_run=dry_run)
    run_cmd([f"mkfs.{root_fs}", *_MKFS_FORCE.get(root_fs, []), layout.root_part], dry_run=dry_run)


def mount_target(
    layout: PartitionLayout,
    target_root: str,
    *,
    esp_mountpoint: str = "/boot/efi",
    dry_run: bool = False,
) -> None:
    run_cmd(["mount", layout.root_part, target_root], dry_run=dry_run)

    if layout.esp_part:
        esp_dir = Path(target_root) / esp_mountpoint.lstrip("/")
        if dry_run:
            logger.info("Would create %s", str(esp_dir))
        else:
            esp_dir.mkdir(parents=True, exist_ok=True)
        run_cmd(["mount", layout.esp_part, str(esp_dir)], dry_run=dry_run)


def unmount_target(target_root: str, *, dry_run: bool = False) -> None:
    run_cmd(["umount", "-R", target_root], check=False, dry_run=dry_run)
