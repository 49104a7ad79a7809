"""Partition device naming.

The kernel names partitions differently per device family: ``/dev/vda`` gets
``/dev/vda1`` while ``/dev/nvme0n1`` gets ``/dev/nvme0n1p1``. Callers pick a
naming scheme with :func:`naming_for_disk` and never concatenate paths
themselves.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Protocol

# Families whose partitions always carry a "p" separator.
_SEPARATOR_FAMILIES = ("nvme", "mmcblk", "loop", "nbd")


class PartitionNaming(Protocol):
    def partition_path(self, disk: str, number: int) -> str:
        ...


@dataclass(frozen=True)
class PlainSuffix:
    """sdX, vdX, hdX, xvdX: partition number appended directly."""

    def partition_path(self, disk: str, number: int) -> str:
        _check_number(number)
        return f"{disk}{number}"


@dataclass(frozen=True)
class SeparatorSuffix:
    """nvme, mmcblk, loop and friends: ``p`` between disk and number."""

    separator: str = "p"

    def partition_path(self, disk: str, number: int) -> str:
        _check_number(number)
        return f"{disk}{self.separator}{number}"


def _check_number(number: int) -> None:
    if number < 1:
        raise ValueError(f"Partition numbers start at 1, got {number}")


def naming_for_disk(disk: str) -> PartitionNaming:
    name = os.path.basename(disk.rstrip("/"))
    if name.startswith(_SEPARATOR_FAMILIES) or name[-1:].isdigit():
        return SeparatorSuffix()
    return PlainSuffix()


@dataclass(frozen=True)
class PartitionLayout:
    disk: str
    root_part: str
    esp_part: Optional[str] = None


def derive_layout(disk: str, *, uefi: bool, naming: Optional[PartitionNaming] = None) -> PartitionLayout:
    """Partition paths for our fixed layouts.

    UEFI puts the ESP first and root second; BIOS has a single root partition.
    """

    naming = naming or naming_for_disk(disk)
    if uefi:
        return PartitionLayout(
            disk=disk,
            esp_part=naming.partition_path(disk, 1),
            root_part=naming.partition_path(disk, 2),
        )
    return PartitionLayout(disk=disk, root_part=naming.partition_path(disk, 1))
