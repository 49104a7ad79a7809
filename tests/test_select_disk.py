import pytest

from archvm_installer.errors import OperatorDeclined, PreflightError
from archvm_installer.main import run
from archvm_installer.pipeline import InstallCtx
from archvm_installer.state_store import new_state
from archvm_installer.steps import SelectDiskStep, step_15_select_disk


def test_accepting_records_the_disk(fake_run, answers, disk_exists, cfg):
    answers("vda", "y")
    state = SelectDiskStep().run(InstallCtx(cfg=cfg), new_state())

    assert state["execution"]["decisions"]["disk"] == "/dev/vda"
    assert fake_run.calls == [["lsblk", "-o", "NAME,SIZE,TYPE,MOUNTPOINTS"]]


@pytest.mark.parametrize("reply", ["n", "", "yes"])
def test_declining_raises(fake_run, answers, disk_exists, cfg, reply):
    answers("vda", reply)
    with pytest.raises(OperatorDeclined):
        SelectDiskStep().run(InstallCtx(cfg=cfg), new_state())


def test_missing_disk(fake_run, answers, monkeypatch, cfg):
    monkeypatch.setattr(step_15_select_disk, "is_block_device", lambda path: False)
    answers("vdz")

    with pytest.raises(PreflightError, match="Disk /dev/vdz does not exist"):
        SelectDiskStep().run(InstallCtx(cfg=cfg), new_state())


def test_empty_answer(fake_run, answers, disk_exists, cfg):
    answers("")
    with pytest.raises(PreflightError, match="No disk given"):
        SelectDiskStep().run(InstallCtx(cfg=cfg), new_state())


def test_declining_never_touches_the_disk(fake_run, answers, as_root, disk_exists, cfg, install_steps):
    answers("vda", "n")

    result = run(cfg=cfg, steps=install_steps(uefi=True))

    assert isinstance(result.error, OperatorDeclined)
    assert result.failed_step == "15_select_disk"
    tools = fake_run.tools()
    assert not any(t == "parted" or t.startswith("mkfs") for t in tools)
    assert tools == ["ping", "timedatectl", "lsblk"]
