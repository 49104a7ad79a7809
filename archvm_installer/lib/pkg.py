from __future__ import annotations

import logging
from typing import Sequence

from .chroot import chroot_as_user, chroot_cmd, quote
from .command import run_cmd

logger = logging.getLogger(__name__)


def pacstrap(target_root: str, packages: Sequence[str], *, dry_run: bool = False) -> None:
    if not packages:
        raise ValueError("pacstrap needs at least one package")
    run_cmd(["pacstrap", target_root, *packages], dry_run=dry_run)


def pacman_install(target_root: str, packages: Sequence[str], *, dry_run: bool = False) -> None:
    if not packages:
        return
    chroot_cmd(
        target_root,
        ["pacman", "-S", "--noconfirm", "--needed", *packages],
        dry_run=dry_run,
    )


def enable_services(target_root: str, services: Sequence[str], *, dry_run: bool = False) -> None:
    for service in services:
        chroot_cmd(target_root, ["systemctl", "enable", service], dry_run=dry_run)


def build_aur_helper(
    target_root: str,
    *,
    user: str,
    repo_url: str,
    build_dir: str = "/tmp",
    dry_run: bool = False,
) -> None:
    """Clone an AUR helper's PKGBUILD repo and build/install it with makepkg as user.

    makepkg refuses to run as root, hence the unprivileged user.
    """

    name = repo_url.rstrip("/").rsplit("/", 1)[-1]
    if name.endswith(".git"):
        name = name[: -len(".git")]
    workdir = f"{build_dir.rstrip('/')}/{name}"

    chroot_as_user(
        target_root,
        user,
        f"rm -rf {quote(workdir)} && git clone {quote(repo_url, workdir)}",
        dry_run=dry_run,
    )
    chroot_as_user(
        target_root,
        user,
        f"cd {quote(workdir)} && makepkg -si --noconfirm",
        dry_run=dry_run,
    )
    logger.info("AUR helper %s installed", name)


def aur_install(
    target_root: str,
    packages: Sequence[str],
    *,
    user: str,
    helper: str = "yay",
    dry_run: bool = False,
) -> None:
    if not packages:
        return
    chroot_as_user(
        target_root,
        user,
        f"{quote(helper)} -S --noconfirm --needed {quote(*packages)}",
        dry_run=dry_run,
    )
