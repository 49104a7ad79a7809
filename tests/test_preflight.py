import os

import pytest

from archvm_installer.errors import PreflightError
from archvm_installer.pipeline import InstallCtx
from archvm_installer.state_store import new_state
from archvm_installer.steps import PreflightStep


def _step(efivars_path):
    step = PreflightStep()
    step.efivars_path = efivars_path
    return step


def test_non_root_fails_before_any_command(fake_run, monkeypatch, cfg, efivars):
    monkeypatch.setattr(os, "geteuid", lambda: 1000)

    with pytest.raises(PreflightError, match="must be run as root"):
        _step(efivars[0]).run(InstallCtx(cfg=cfg), new_state())

    assert fake_run.calls == []


def test_missing_tools_are_reported(fake_run, monkeypatch, cfg, efivars):
    import shutil

    monkeypatch.setattr(os, "geteuid", lambda: 0)
    monkeypatch.setattr(shutil, "which", lambda tool: None if tool == "pacstrap" else f"/usr/bin/{tool}")

    with pytest.raises(PreflightError, match="pacstrap"):
        _step(efivars[0]).run(InstallCtx(cfg=cfg), new_state())

    assert fake_run.calls == []


def test_offline_host_is_rejected(fake_run, as_root, cfg, efivars):
    fake_run.fail_when("ping")

    with pytest.raises(PreflightError, match="No internet connection"):
        _step(efivars[0]).run(InstallCtx(cfg=cfg), new_state())

    assert fake_run.calls == [["ping", "-c", "1", "archlinux.org"]]


@pytest.mark.parametrize("uefi, expected", [(True, "UEFI"), (False, "BIOS")])
def test_records_boot_mode_and_enables_ntp(fake_run, as_root, cfg, efivars, uefi, expected):
    present, absent = efivars
    state = _step(present if uefi else absent).run(InstallCtx(cfg=cfg), new_state())

    assert state["host"]["boot_mode"] == expected
    assert fake_run.calls[-1] == ["timedatectl", "set-ntp", "true"]


def test_dry_run_tolerates_non_root(fake_run, monkeypatch, cfg, efivars):
    monkeypatch.setattr(os, "geteuid", lambda: 1000)

    state = _step(efivars[1]).run(InstallCtx(cfg=cfg, dry_run=True), new_state())

    assert state["host"]["boot_mode"] == "BIOS"
    assert fake_run.calls == []
