from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from .errors import ConfigError
from .lib.env import PATHS

SUPPORTED_FILESYSTEMS = ("ext4", "btrfs", "xfs")
MIN_ESP_SIZE_MIB = 100

# Literals the old script shipped with; refusing them keeps them out of new installs.
_DEFAULT_PASSWORDS = {"password", "root", "archuser", "changeme"}
_HOSTNAME_RE = re.compile(r"^(?!-)[A-Za-z0-9-]{1,63}(?<!-)$")
_USERNAME_RE = re.compile(r"^[a-z_][a-z0-9_-]{0,31}$")


@dataclass(frozen=True)
class InstallConfig:
    """Everything the installer used to hardcode.

    System identity:
    - hostname, timezone (zoneinfo name), locale (e.g. en_US.UTF-8)

    Accounts:
    - root_password, username, user_password, user_groups
    - sudoers_rule: written to /etc/sudoers.d/wheel

    Storage:
    - target_root: where the new system is mounted during install
    - device_prefix: joined with the operator's disk answer
    - filesystem: root filesystem (ext4|btrfs|xfs)
    - esp_size_mib: EFI system partition size (UEFI only)

    Software:
    - base_packages go through pacstrap; the other lists through pacman in target
    - aur_helper_repo is cloned and built with makepkg; aur_packages use that helper
    - shell_installer_url is fetched and run unattended as the user
    """

    hostname: str = "archvm"
    timezone: str = "UTC"
    locale: str = "en_US.UTF-8"

    root_password: str = ""
    username: str = "archuser"
    user_password: str = ""
    user_groups: Tuple[str, ...] = ("wheel",)
    sudoers_rule: str = "%wheel ALL=(ALL) ALL"

    target_root: str = PATHS.target_root
    device_prefix: str = PATHS.device_prefix
    filesystem: str = "ext4"
    esp_size_mib: int = 512

    connectivity_host: str = "archlinux.org"

    base_packages: Tuple[str, ...] = ("base", "base-devel", "linux", "linux-firmware")
    utility_packages: Tuple[str, ...] = ("networkmanager", "sudo", "vim", "git")
    services: Tuple[str, ...] = ("NetworkManager",)
    desktop_packages: Tuple[str, ...] = ("xorg", "plasma", "kde-applications", "sddm")
    display_manager: str = "sddm"
    extra_packages: Tuple[str, ...] = ("zsh", "git", "code")

    bootloader_id: str = "GRUB"

    aur_helper: str = "yay"
    aur_helper_repo: str = "https://aur.archlinux.org/yay.git"
    aur_packages: Tuple[str, ...] = ("brave-bin",)

    shell_installer_url: str = "https://raw.githubusercontent.com/ohmyzsh/ohmyzsh/master/tools/install.sh"
    login_shell: str = "/usr/bin/zsh"

    @property
    def locale_gen_line(self) -> str:
        # en_US.UTF-8 -> "en_US.UTF-8 UTF-8"
        charset = self.locale.split(".", 1)[1] if "." in self.locale else "ISO-8859-1"
        return f"{self.locale} {charset}"

    def with_passwords(self, *, root_password: Optional[str] = None, user_password: Optional[str] = None) -> "InstallConfig":
        changes: Dict[str, Any] = {}
        if root_password is not None:
            changes["root_password"] = root_password
        if user_password is not None:
            changes["user_password"] = user_password
        return dataclasses.replace(self, **changes)

    def validate(self) -> "InstallConfig":
        for name in ("root_password", "user_password"):
            value = getattr(self, name)
            if not value:
                raise ConfigError(f"{name} must not be empty")
            if value.lower() in _DEFAULT_PASSWORDS:
                raise ConfigError(f"{name} is a well-known default; choose another")

        if not _HOSTNAME_RE.match(self.hostname):
            raise ConfigError(f"Invalid hostname: {self.hostname!r}")
        if not _USERNAME_RE.match(self.username):
            raise ConfigError(f"Invalid username: {self.username!r}")
        if self.username == "root":
            raise ConfigError("username must not be root")
        if not self.timezone or self.timezone.startswith("/") or ".." in self.timezone:
            raise ConfigError(f"Invalid timezone: {self.timezone!r}")
        if not self.locale:
            raise ConfigError("locale must not be empty")

        if self.filesystem not in SUPPORTED_FILESYSTEMS:
            raise ConfigError(
                f"Unsupported filesystem {self.filesystem!r}; expected one of {', '.join(SUPPORTED_FILESYSTEMS)}"
            )
        if self.esp_size_mib < MIN_ESP_SIZE_MIB:
            raise ConfigError(f"esp_size_mib must be at least {MIN_ESP_SIZE_MIB}")
        if not Path(self.target_root).is_absolute():
            raise ConfigError(f"target_root must be an absolute path: {self.target_root!r}")
        if not self.device_prefix.endswith("/"):
            raise ConfigError(f"device_prefix must end with '/': {self.device_prefix!r}")
        if not self.base_packages:
            raise ConfigError("base_packages must not be empty")
        return self

    def to_dict(self, *, redact: bool = True) -> Dict[str, Any]:
        data = dataclasses.asdict(self)
        for key, value in data.items():
            if isinstance(value, tuple):
                data[key] = list(value)
        if redact:
            for key in ("root_password", "user_password"):
                data[key] = "***" if data[key] else ""
        return data


def config_from_mapping(raw: Mapping[str, Any]) -> InstallConfig:
    known = {f.name: f for f in dataclasses.fields(InstallConfig)}
    unknown = sorted(set(raw) - set(known))
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

    values: Dict[str, Any] = {}
    for key, value in raw.items():
        default = known[key].default
        if isinstance(default, tuple):
            if isinstance(value, str) or not isinstance(value, (list, tuple)):
                raise ConfigError(f"{key} must be a list")
            values[key] = tuple(str(v).strip() for v in value if str(v).strip())
        elif isinstance(default, int) and not isinstance(default, bool):
            try:
                values[key] = int(value)
            except (TypeError, ValueError) as e:
                raise ConfigError(f"{key} must be an integer, got {value!r}") from e
        else:
            values[key] = "" if value is None else str(value)
    return InstallConfig(**values)


def load_config(path: Optional[str]) -> InstallConfig:
    """Load an InstallConfig from YAML; no path means all defaults."""

    if not path:
        return InstallConfig()

    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Config file not found: {path}")
    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ConfigError("config must be YAML")

    try:
        import yaml  # type: ignore
    except Exception as e:
        raise RuntimeError("PyYAML is required to read the installer config") from e

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Could not parse {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"{path} must contain a mapping/object")

    return config_from_mapping(raw)
