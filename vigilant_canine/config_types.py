"""Configuration data structures with their defaults."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from vigilant_canine.model import HashAlgorithm

__all__ = [
    "DaemonConfig",
    "HashConfig",
    "MonitorSystemConfig",
    "MonitorFlatpakConfig",
    "MonitorOstreeConfig",
    "MonitorHomeConfig",
    "MonitorConfig",
    "AlertConfig",
    "ScanConfig",
    "JournalFieldMatchConfig",
    "JournalRuleConfig",
    "JournalConfig",
    "CorrelationRuleConfig",
    "CorrelationConfig",
    "AuditFieldMatchConfig",
    "AuditRuleConfig",
    "AuditConfig",
    "HomeMonitoringPolicy",
    "Config",
]


@dataclass
class DaemonConfig:
    log_level: str = "info"
    db_path: Path = Path("/var/lib/vigilant-canine/vc.db")
    worker_threads: int = 0  # 0 = auto-detect


@dataclass
class HashConfig:
    algorithm: HashAlgorithm = HashAlgorithm.BLAKE3


@dataclass
class MonitorSystemConfig:
    paths: list[Path] = field(default_factory=list)
    exclude: list[Path] = field(default_factory=list)


@dataclass
class MonitorFlatpakConfig:
    enabled: bool = True
    system: bool = True
    user: bool = False


@dataclass
class MonitorOstreeConfig:
    enabled: bool = True
    verify_deployments: bool = True
    monitor_object_store: bool = True


@dataclass
class MonitorHomeConfig:
    enabled: bool = False
    paths: list[Path] = field(default_factory=list)
    exclude: list[Path] = field(default_factory=list)


@dataclass
class MonitorConfig:
    system: MonitorSystemConfig = field(default_factory=MonitorSystemConfig)
    flatpak: MonitorFlatpakConfig = field(default_factory=MonitorFlatpakConfig)
    ostree: MonitorOstreeConfig = field(default_factory=MonitorOstreeConfig)
    home: MonitorHomeConfig = field(default_factory=MonitorHomeConfig)


@dataclass
class AlertConfig:
    journal: bool = True
    dbus: bool = True
    socket: bool = True


@dataclass
class ScanConfig:
    schedule: str = "daily"
    on_boot: bool = True


@dataclass
class JournalFieldMatchConfig:
    field: str = ""
    pattern: str = ""
    type: str = "contains"  # exact, contains, regex, starts_with
    negate: bool = False


@dataclass
class JournalRuleConfig:
    name: str = ""
    description: str = ""
    match: list[JournalFieldMatchConfig] = field(default_factory=list)
    action: str = "suspicious_log"
    severity: str = "warning"
    enabled: bool = True


@dataclass
class JournalConfig:
    enabled: bool = True
    max_priority: int = 6  # LOG_INFO
    exclude_units: list[str] = field(default_factory=list)
    exclude_identifiers: list[str] = field(default_factory=list)
    rules: list[JournalRuleConfig] = field(default_factory=list)


@dataclass
class CorrelationRuleConfig:
    name: str = ""
    event_match: str = ""  # rule name or event category
    threshold: int = 5
    window_seconds: int = 60
    escalated_severity: str = "critical"


@dataclass
class CorrelationConfig:
    enabled: bool = True
    window_seconds: int = 300
    rules: list[CorrelationRuleConfig] = field(default_factory=list)


@dataclass
class AuditFieldMatchConfig:
    field: str = ""
    pattern: str = ""
    # exact, contains, regex, starts_with, numeric_eq, numeric_gt, numeric_lt
    type: str = "contains"
    negate: bool = False


@dataclass
class AuditRuleConfig:
    name: str = ""
    description: str = ""
    match: list[AuditFieldMatchConfig] = field(default_factory=list)
    action: str = "suspicious_syscall"
    severity: str = "warning"
    enabled: bool = True
    syscall_filter: int = 0


@dataclass
class AuditConfig:
    enabled: bool = True
    sanitize_command_lines: bool = True
    exclude_comms: list[str] = field(default_factory=list)
    exclude_uids: list[int] = field(default_factory=list)
    rules: list[AuditRuleConfig] = field(default_factory=list)


@dataclass
class HomeMonitoringPolicy:
    monitor_users: list[str] = field(default_factory=list)
    monitor_groups: list[str] = field(default_factory=list)
    allow_user_opt_out: bool = True
    mandatory_paths: list[str] = field(default_factory=list)


@dataclass
class Config:
    """Top-level configuration."""

    daemon: DaemonConfig = field(default_factory=DaemonConfig)
    hash: HashConfig = field(default_factory=HashConfig)
    monitor: MonitorConfig = field(default_factory=MonitorConfig)
    alerts: AlertConfig = field(default_factory=AlertConfig)
    scan: ScanConfig = field(default_factory=ScanConfig)
    journal: JournalConfig = field(default_factory=JournalConfig)
    correlation: CorrelationConfig = field(default_factory=CorrelationConfig)
    audit: AuditConfig = field(default_factory=AuditConfig)
    home_policy: HomeMonitoringPolicy = field(default_factory=HomeMonitoringPolicy)