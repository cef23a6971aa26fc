import os
import stat

import pytest

from vigilant_canine.detector import (
    DistroDetectionError,
    DistroInfo,
    _command_exists,
    distro_type_name,
    is_btrfs_snapshot_system,
    is_ostree_system,
    parse_os_release,
)
from vigilant_canine.model import DistroType


def _write(tmp_path, text):
    path = tmp_path / "os-release"
    path.write_text(text)
    return path


def test_parse_basic_fields(tmp_path):
    path = _write(
        tmp_path,
        '# comment line\n\nNAME="Fedora Linux"\nVERSION_ID=39\nVARIANT="Workstation Edition"\n',
    )
    info = parse_os_release(path)
    assert info == DistroInfo(
        type=DistroType.TRADITIONAL,
        name="Fedora Linux",
        version="39",
        variant="Workstation Edition",
    )


def test_parse_single_quotes_stripped(tmp_path):
    path = _write(tmp_path, "NAME='Ubuntu'\nVERSION_ID='24.04'\n")
    info = parse_os_release(path)
    assert info.name == "Ubuntu"
    assert info.version == "24.04"


def test_variant_id_last_one_wins(tmp_path):
    path = _write(tmp_path, "NAME=Fedora\nVARIANT=Silverblue\nVARIANT_ID=silverblue\n")
    assert parse_os_release(path).variant == "silverblue"


def test_mismatched_quotes_kept(tmp_path):
    path = _write(tmp_path, "NAME=\"Arch'\n")
    assert parse_os_release(path).name == "\"Arch'"


def test_single_quote_character_kept(tmp_path):
    path = _write(tmp_path, 'NAME=X\nVERSION_ID="\n')
    assert parse_os_release(path).version == '"'


def test_lines_without_equals_ignored(tmp_path):
    path = _write(tmp_path, "garbage line\nNAME=Debian\n")
    info = parse_os_release(path)
    assert info.name == "Debian"
    assert info.version == ""


def test_value_with_equals_sign(tmp_path):
    path = _write(tmp_path, "NAME=a=b\n")
    assert parse_os_release(path).name == "a=b"


def test_missing_name_raises(tmp_path):
    path = _write(tmp_path, "VERSION_ID=1\n")
    with pytest.raises(DistroDetectionError, match="Failed to parse NAME"):
        parse_os_release(path)


def test_missing_file_raises(tmp_path):
    with pytest.raises(DistroDetectionError, match="Failed to open"):
        parse_os_release(tmp_path / "absent")


def test_distro_type_names():
    assert distro_type_name(DistroType.TRADITIONAL) == "traditional"
    assert distro_type_name(DistroType.OSTREE) == "ostree"
    assert distro_type_name(DistroType.BTRFS_SNAPSHOT) == "btrfs_snapshot"


def test_distro_type_name_unknown():
    assert distro_type_name("bogus") == "unknown"


def test_distro_type_name_round_trip():
    for member in DistroType:
        assert DistroType(distro_type_name(member)) is member


def test_command_exists_finds_executable(tmp_path, monkeypatch):
    tool = tmp_path / "ostree"
    tool.write_text("#!/bin/sh\n")
    tool.chmod(tool.stat().st_mode | stat.S_IXUSR)
    monkeypatch.setenv("PATH", f"/nonexistent-dir:{tmp_path}")
    assert _command_exists("ostree") is True
    assert _command_exists("snapper") is False


def test_command_exists_requires_exec_bit(tmp_path, monkeypatch):
    tool = tmp_path / "plain"
    tool.write_text("data")
    tool.chmod(0o644)
    monkeypatch.setenv("PATH", str(tmp_path))
    assert _command_exists("plain") is (os.geteuid() == 0 and os.access(tool, os.X_OK))


def test_command_exists_without_path(monkeypatch):
    monkeypatch.delenv("PATH", raising=False)
    assert _command_exists("sh") is False


def test_no_ostree_without_command(tmp_path, monkeypatch):
    monkeypatch.setenv("PATH", str(tmp_path))
    assert is_ostree_system() is False


def test_no_btrfs_snapshots_without_tools(tmp_path, monkeypatch):
    monkeypatch.setenv("PATH", str(tmp_path))
    assert is_btrfs_snapshot_system() is False