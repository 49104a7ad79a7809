from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Dict

from .env import PATHS


class BootMode(str, Enum):
    UEFI = "UEFI"
    BIOS = "BIOS"


def detect_boot_mode(efivars: str = PATHS.efivars) -> BootMode:
    """Detect how the *currently running* environment was booted.

    The efivars directory only exists when the kernel was started by UEFI
    firmware; its absence means legacy BIOS.
    """

    if Path(efivars).is_dir():
        return BootMode.UEFI
    return BootMode.BIOS


def boot_mode_from_state(state: Dict[str, Any]) -> BootMode:
    value = (state.get("host") or {}).get("boot_mode")
    if value not in {m.value for m in BootMode}:
        raise RuntimeError(f"host.boot_mode must be UEFI|BIOS, got {value}; run preflight first")
    return BootMode(value)
