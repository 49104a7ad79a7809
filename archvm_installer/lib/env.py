from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Paths:
    target_root: str = "/mnt"
    device_prefix: str = "/dev/"
    efivars: str = "/sys/firmware/efi/efivars"
    esp_mountpoint: str = "/boot/efi"
    log_default: str = "/var/log/archvm-installer.log"


PATHS = Paths()
