"""Core enumerations shared across the package."""

from __future__ import annotations

from enum import StrEnum


class HashAlgorithm(StrEnum):
    """Digest algorithm used for file baselines."""

    BLAKE3 = "blake3"  # Default: fast, cryptographically secure
    SHA256 = "sha256"  # Alternative: widely recognised, slower


class Severity(StrEnum):
    """Alert severity levels, from least to most severe."""

    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"
    EMERGENCY = "emergency"


class DistroType(StrEnum):
    """Kind of distribution, used to pick a baseline strategy."""

    TRADITIONAL = "traditional"
    OSTREE = "ostree"
    BTRFS_SNAPSHOT = "btrfs_snapshot"