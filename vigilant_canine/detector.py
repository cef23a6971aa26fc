"""Detection of the running distribution and its update model."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from vigilant_canine.model import DistroType

__all__ = [
    "DistroDetectionError",
    "DistroInfo",
    "is_ostree_system",
    "is_btrfs_snapshot_system",
    "parse_os_release",
    "detect_distro",
    "distro_type_name",
]

_OS_RELEASE = Path("/etc/os-release")
_OS_RELEASE_FALLBACK = Path("/usr/lib/os-release")
_MOUNTS = Path("/proc/self/mounts")


class DistroDetectionError(Exception):
    """Raised when the distribution cannot be identified."""


@dataclass
class DistroInfo:
    """Distribution identification gathered from os-release and the system."""

    type: DistroType = DistroType.TRADITIONAL
    name: str = ""  # e.g. "Fedora", "Ubuntu"
    version: str = ""  # e.g. "39", "24.04"
    variant: str = ""  # e.g. "Workstation", "Silverblue"


def _command_exists(command: str) -> bool:
    """Return True if an executable named ``command`` is found on PATH."""
    path_env = os.environ.get("PATH")
    if path_env is None:
        return False
    if not path_env:
        return False
    for directory in path_env.split(":"):
        candidate = Path(directory) / command
        if candidate.exists() and os.access(candidate, os.X_OK):
            return True
    return False


def _is_root_on_btrfs() -> bool:
    """Return True if the root filesystem is mounted as btrfs."""
    try:
        lines = _MOUNTS.read_text().splitlines()
    except OSError:
        return False
    root_type = None
    for line in lines:
        fields = line.split()
        if len(fields) >= 3 and fields[1] == "/":
            root_type = fields[2]  # the last mount on "/" is the visible one
    return root_type == "btrfs"


def _parse_os_release_line(line: str) -> tuple[str, str]:
    key, sep, value = line.partition("=")
    if not sep:
        return "", ""
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        value = value[1:-1]
    return key, value


def is_ostree_system() -> bool:
    """Return True if /ostree exists and the ostree command is available."""
    if not Path("/ostree").exists():
        return False
    return _command_exists("ostree")


def is_btrfs_snapshot_system() -> bool:
    """Return True if root is on btrfs and a snapshot tool is installed."""
    if not _is_root_on_btrfs():
        return False
    return _command_exists("snapper") or _command_exists("transactional-update")


def parse_os_release(path: str | os.PathLike[str] | None = None) -> DistroInfo:
    """Read name, version and variant from an os-release file.

    Without ``path``, /etc/os-release is used, falling back to
    /usr/lib/os-release when it does not exist.
    Raises DistroDetectionError if the file cannot be read or lacks NAME.
    """
    if path is None:
        os_release = _OS_RELEASE if _OS_RELEASE.exists() else _OS_RELEASE_FALLBACK
    else:
        os_release = Path(path)

    try:
        with open(os_release, encoding="utf-8", errors="replace") as handle:
            lines = [line.rstrip("\n") for line in handle]
    except OSError as exc:
        raise DistroDetectionError(f"Failed to open {os_release}") from exc

    info = DistroInfo(type=DistroType.TRADITIONAL)
    for line in lines:
        if not line or line.startswith("#"):
            continue
        key, value = _parse_os_release_line(line)
        if key == "NAME":
            info.name = value
        elif key == "VERSION_ID":
            info.version = value
        elif key in ("VARIANT", "VARIANT_ID"):
            info.variant = value

    if not info.name:
        raise DistroDetectionError("Failed to parse NAME from os-release")
    return info


def detect_distro() -> DistroInfo:
    """Identify the distribution and classify its update model."""
    info = parse_os_release()
    if is_ostree_system():
        info.type = DistroType.OSTREE
    elif is_btrfs_snapshot_system():
        info.type = DistroType.BTRFS_SNAPSHOT
    else:
        info.type = DistroType.TRADITIONAL
    return info


def distro_type_name(distro_type: DistroType) -> str:
    """Return the name of ``distro_type``, or "unknown"."""
    try:
        return DistroType(distro_type).value
    except ValueError:
        return "unknown"