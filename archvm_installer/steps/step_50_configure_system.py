from __future__ import annotations

import logging
from typing import Any, Dict, List

from .. import console
from ..errors import InstallerError
from ..lib.bootloader import install_grub
from ..lib.chroot import chroot_as_user, chroot_cmd, quote, remove_file, set_password, write_file
from ..lib.env import PATHS
from ..lib.firmware import boot_mode_from_state
from ..lib.pkg import aur_install, build_aur_helper, enable_services, pacman_install
from ..pipeline import InstallCtx, Step, run_pipeline

logger = logging.getLogger(__name__)

# Present only while AUR packages build; makepkg -si and yay call sudo non-interactively.
# sudo reads sudoers.d in lexical order and the last matching rule wins, so this
# must sort after the wheel drop-in.
_AUR_SUDOERS = "/etc/sudoers.d/zz-archvm-installer-aur"
_SHELL_INSTALLER = "/tmp/archvm-shell-install.sh"


def _target_root(state: Dict[str, Any]) -> str:
    mounts = (state.get("execution") or {}).get("mounts") or {}
    target_root = mounts.get("target_root")
    if not target_root:
        raise RuntimeError("execution.mounts.target_root missing")
    return target_root


class TimezoneTask:
    step_id = "timezone"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        root = _target_root(state)
        console.step("Setting timezone")
        chroot_cmd(root, ["ln", "-sf", f"/usr/share/zoneinfo/{ctx.cfg.timezone}", "/etc/localtime"], dry_run=ctx.dry_run)
        chroot_cmd(root, ["hwclock", "--systohc"], dry_run=ctx.dry_run)
        return state


class LocaleTask:
    step_id = "locale"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        root = _target_root(state)
        console.step("Setting locale")
        write_file(root, "/etc/locale.gen", ctx.cfg.locale_gen_line + "\n", dry_run=ctx.dry_run)
        chroot_cmd(root, ["locale-gen"], dry_run=ctx.dry_run)
        write_file(root, "/etc/locale.conf", f"LANG={ctx.cfg.locale}\n", dry_run=ctx.dry_run)
        return state


class HostnameTask:
    step_id = "hostname"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        root = _target_root(state)
        hostname = ctx.cfg.hostname
        console.step("Setting hostname")
        write_file(root, "/etc/hostname", hostname + "\n", dry_run=ctx.dry_run)
        write_file(
            root,
            "/etc/hosts",
            "\n".join(
                [
                    "127.0.0.1 localhost",
                    "::1       localhost",
                    f"127.0.1.1 {hostname}.localdomain {hostname}",
                    "",
                ]
            ),
            dry_run=ctx.dry_run,
        )
        state.setdefault("execution", {}).setdefault("decisions", {})["hostname"] = hostname
        return state


class RootPasswordTask:
    step_id = "root_password"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        console.step("Setting root password")
        set_password(_target_root(state), "root", ctx.cfg.root_password, dry_run=ctx.dry_run)
        return state


class BootloaderTask:
    step_id = "bootloader"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        root = _target_root(state)
        boot_mode = boot_mode_from_state(state)
        disk = ((state.get("execution") or {}).get("decisions") or {}).get("disk", "")

        console.step("Installing bootloader")
        install_grub(
            target_root=root,
            boot_mode=boot_mode,
            disk=disk,
            efi_directory=PATHS.esp_mountpoint,
            bootloader_id=ctx.cfg.bootloader_id,
            dry_run=ctx.dry_run,
        )
        return state


class UtilitiesTask:
    step_id = "utilities"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        root = _target_root(state)
        console.step("Installing necessary packages")
        pacman_install(root, ctx.cfg.utility_packages, dry_run=ctx.dry_run)
        enable_services(root, ctx.cfg.services, dry_run=ctx.dry_run)
        return state


class UserTask:
    step_id = "user"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        root = _target_root(state)
        cfg = ctx.cfg
        console.step("Creating user")
        argv = ["useradd", "-m"]
        if cfg.user_groups:
            argv += ["-G", ",".join(cfg.user_groups)]
        argv += ["-s", "/bin/bash", cfg.username]
        chroot_cmd(root, argv, dry_run=ctx.dry_run)
        set_password(root, cfg.username, cfg.user_password, dry_run=ctx.dry_run)

        # sudo refuses drop-ins that are group/world writable.
        write_file(root, "/etc/sudoers.d/wheel", cfg.sudoers_rule + "\n", mode=0o440, dry_run=ctx.dry_run)

        state.setdefault("execution", {}).setdefault("decisions", {})["username"] = cfg.username
        return state


class DesktopTask:
    step_id = "desktop"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        root = _target_root(state)
        console.step("Installing KDE Plasma desktop environment")
        pacman_install(root, ctx.cfg.desktop_packages, dry_run=ctx.dry_run)
        if ctx.cfg.display_manager:
            enable_services(root, [ctx.cfg.display_manager], dry_run=ctx.dry_run)
        return state


class ExtraPackagesTask:
    step_id = "extra_packages"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        console.step("Installing additional requested software")
        pacman_install(_target_root(state), ctx.cfg.extra_packages, dry_run=ctx.dry_run)
        return state


class AurTask:
    step_id = "aur"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        root = _target_root(state)
        cfg = ctx.cfg

        write_file(root, _AUR_SUDOERS, f"{cfg.username} ALL=(ALL) NOPASSWD: ALL\n", mode=0o440, dry_run=ctx.dry_run)
        try:
            console.step(f"Installing {cfg.aur_helper} (AUR helper)")
            build_aur_helper(root, user=cfg.username, repo_url=cfg.aur_helper_repo, dry_run=ctx.dry_run)

            if cfg.aur_packages:
                console.step(f"Installing {', '.join(cfg.aur_packages)} from AUR")
                aur_install(root, cfg.aur_packages, user=cfg.username, helper=cfg.aur_helper, dry_run=ctx.dry_run)
        finally:
            remove_file(root, _AUR_SUDOERS, dry_run=ctx.dry_run)
        return state


class ShellFrameworkTask:
    step_id = "shell_framework"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        root = _target_root(state)
        cfg = ctx.cfg

        if cfg.shell_installer_url:
            console.step("Installing Oh My Zsh")
            # Fetched to a file so a failed download fails the task.
            # --unattended skips the installer's own chsh; the shell is changed below as root.
            chroot_as_user(
                root,
                cfg.username,
                f"curl -fsSL {quote(cfg.shell_installer_url)} -o {_SHELL_INSTALLER} && sh {_SHELL_INSTALLER} --unattended",
                dry_run=ctx.dry_run,
            )

        chroot_cmd(root, ["chsh", "-s", cfg.login_shell, cfg.username], dry_run=ctx.dry_run)
        return state


CONFIGURE_TASKS: List[Step] = [
    TimezoneTask(),
    LocaleTask(),
    HostnameTask(),
    RootPasswordTask(),
    BootloaderTask(),
    UtilitiesTask(),
    UserTask(),
    DesktopTask(),
    ExtraPackagesTask(),
    AurTask(),
    ShellFrameworkTask(),
]


class ConfigurationPhaseError(InstallerError):
    def __init__(self, failed_task: str, completed: List[str], cause: BaseException) -> None:
        self.failed_task = failed_task
        self.completed = list(completed)
        self.cause = cause
        super().__init__(f"In-target configuration failed at {failed_task}: {cause}")


class ConfigureSystemStep:
    """Configure the new system from inside it (arch-chroot per command).

    A failing task stops the phase and fails this step, so the outer run
    stops too.
    """

    step_id = "50_configure_system"

    def __init__(self, tasks: List[Step] | None = None) -> None:
        self.tasks = CONFIGURE_TASKS if tasks is None else tasks

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        _target_root(state)
        console.section("Configuring system")

        exe = state.setdefault("execution", {})
        outer_step = exe.get("current_step")
        result = run_pipeline(ctx=ctx, state=state, steps=self.tasks)
        state = result.state
        exe = state.setdefault("execution", {})
        exe["current_step"] = outer_step

        report = exe.setdefault("configure", {})
        report["completed_tasks"] = result.completed_steps
        report["failed_task"] = result.failed_step

        if result.failed_step is not None and result.error is not None:
            raise ConfigurationPhaseError(result.failed_step, result.completed_steps, result.error)

        logger.info("In-target configuration done (%d tasks)", len(result.completed_steps))
        return state
