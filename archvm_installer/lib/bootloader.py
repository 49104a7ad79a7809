from __future__ import annotations

import logging

from .chroot import chroot_cmd
from .firmware import BootMode
from .pkg import pacman_install

logger = logging.getLogger(__name__)


def install_grub(
    *,
    target_root: str,
    boot_mode: BootMode,
    disk: str,
    efi_directory: str = "/boot/efi",
    bootloader_id: str = "GRUB",
    dry_run: bool = False,
) -> None:
    """Install GRUB for the detected firmware and generate grub.cfg."""

    if boot_mode is BootMode.UEFI:
        # Assumes the ESP is mounted at efi_directory in target.
        pacman_install(target_root, ["grub", "efibootmgr"], dry_run=dry_run)
        chroot_cmd(
            target_root,
            [
                "grub-install",
                "--target=x86_64-efi",
                f"--efi-directory={efi_directory}",
                f"--bootloader-id={bootloader_id}",
            ],
            dry_run=dry_run,
        )
    else:
        pacman_install(target_root, ["grub"], dry_run=dry_run)
        chroot_cmd(target_root, ["grub-install", "--target=i386-pc", disk], dry_run=dry_run)

    chroot_cmd(target_root, ["grub-mkconfig", "-o", "/boot/grub/grub.cfg"], dry_run=dry_run)
    logger.info("GRUB installed (boot_mode=%s)", boot_mode.value)
