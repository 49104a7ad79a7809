from pathlib import Path

import pytest

from archvm_installer.lib.fstab import generate_fstab, write_fstab


def test_generate_uses_uuids(fake_run, target_root):
    text = generate_fstab(target_root)
    assert fake_run.calls == [["genfstab", "-U", target_root]]
    assert "UUID=1111" in text


def test_write_replaces_instead_of_appending(target_root):
    entries = "UUID=1111 / ext4 rw,relatime 0 1\n"
    write_fstab(target_root, entries)
    write_fstab(target_root, entries)

    fstab = (Path(target_root) / "etc/fstab").read_text()
    assert fstab.count("UUID=1111") == 1


def test_empty_genfstab_output_is_an_error(target_root):
    with pytest.raises(RuntimeError, match="no entries"):
        write_fstab(target_root, "\n")


def test_dry_run_writes_nothing(target_root):
    write_fstab(target_root, "", dry_run=True)
    assert not (Path(target_root) / "etc/fstab").exists()
