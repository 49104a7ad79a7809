from pathlib import Path

import pytest

from archvm_installer.config import InstallConfig, config_from_mapping, load_config
from archvm_installer.errors import ConfigError

EXAMPLE = Path(__file__).resolve().parents[1] / "config.example.yaml"


def _valid(**overrides):
    values = dict(root_password="r00t-secret", user_password="us3r-secret")
    values.update(overrides)
    return InstallConfig(**values)


def test_example_config_loads_with_defaults():
    cfg = load_config(str(EXAMPLE))
    assert cfg == InstallConfig()
    assert cfg.aur_packages == ("brave-bin",)


def test_no_path_means_defaults():
    assert load_config(None) == InstallConfig()


def test_yaml_values_override_defaults(tmp_path):
    p = tmp_path / "install.yaml"
    p.write_text("hostname: devbox\nesp_size_mib: '1024'\nextra_packages: [zsh, tmux]\n")
    cfg = load_config(str(p))
    assert cfg.hostname == "devbox"
    assert cfg.esp_size_mib == 1024
    assert cfg.extra_packages == ("zsh", "tmux")


def test_unknown_keys_are_rejected():
    with pytest.raises(ConfigError, match="Unknown config keys: keymap"):
        config_from_mapping({"keymap": "de"})


def test_lists_must_be_lists():
    with pytest.raises(ConfigError, match="extra_packages must be a list"):
        config_from_mapping({"extra_packages": "zsh"})


def test_non_mapping_yaml_is_rejected(tmp_path):
    p = tmp_path / "install.yml"
    p.write_text("- a\n- b\n")
    with pytest.raises(ConfigError):
        load_config(str(p))


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(str(tmp_path / "nope.yaml"))


@pytest.mark.parametrize("password", ["", "password", "Password", "changeme"])
def test_empty_and_default_passwords_are_refused(password):
    with pytest.raises(ConfigError):
        _valid(root_password=password).validate()
    with pytest.raises(ConfigError):
        _valid(user_password=password).validate()


@pytest.mark.parametrize(
    "overrides",
    [
        {"hostname": "-bad"},
        {"hostname": "has space"},
        {"username": "Root"},
        {"username": "root"},
        {"timezone": "../etc/passwd"},
        {"filesystem": "ntfs"},
        {"esp_size_mib": 32},
        {"target_root": "mnt"},
        {"device_prefix": "/dev"},
        {"base_packages": ()},
    ],
)
def test_invalid_fields(overrides):
    with pytest.raises(ConfigError):
        _valid(**overrides).validate()


def test_defaults_validate_once_passwords_are_set():
    assert _valid().validate().hostname == "archvm"


def test_locale_gen_line():
    assert _valid().locale_gen_line == "en_US.UTF-8 UTF-8"
    assert _valid(locale="de_DE").locale_gen_line == "de_DE ISO-8859-1"


def test_to_dict_redacts_passwords():
    data = _valid().to_dict()
    assert data["root_password"] == "***"
    assert data["user_password"] == "***"
    assert data["base_packages"] == ["base", "base-devel", "linux", "linux-firmware"]


def test_with_passwords_only_replaces_given_values():
    cfg = InstallConfig(root_password="keep-me").with_passwords(user_password="new-one")
    assert cfg.root_password == "keep-me"
    assert cfg.user_password == "new-one"
