"""Loading, parsing and merging of TOML configuration files."""

from __future__ import annotations

import copy
import os
import tomllib
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any, TypeVar

from vigilant_canine.config_types import (
    AlertConfig,
    AuditConfig,
    AuditFieldMatchConfig,
    AuditRuleConfig,
    Config,
    CorrelationConfig,
    CorrelationRuleConfig,
    DaemonConfig,
    HashConfig,
    HomeMonitoringPolicy,
    JournalConfig,
    JournalFieldMatchConfig,
    JournalRuleConfig,
    MonitorConfig,
    ScanConfig,
)
from vigilant_canine.hashing import HashError, string_to_algorithm
from vigilant_canine.model import HashAlgorithm

__all__ = [
    "ConfigError",
    "parse_config",
    "load_config",
    "load_config_or_default",
    "merge_configs",
]

_T = TypeVar("_T")
_U8 = 0xFF
_U32 = 0xFFFFFFFF
_U64 = 0xFFFFFFFFFFFFFFFF


class ConfigError(Exception):
    """Raised when a configuration file cannot be read, parsed or validated."""


class _InvalidValue(Exception):
    """A value in an otherwise well-formed document is not acceptable."""


# --- typed access to TOML tables ---------------------------------------------


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _get_str(table: dict[str, Any], key: str, default: str) -> str:
    value = table.get(key)
    return value if isinstance(value, str) else default


def _get_bool(table: dict[str, Any], key: str, default: bool) -> bool:
    value = table.get(key)
    return value if isinstance(value, bool) else default


def _get_int(table: dict[str, Any], key: str) -> int | None:
    value = table.get(key)
    return value if _is_int(value) else None


def _table(container: Any, key: str) -> dict[str, Any] | None:
    if not isinstance(container, dict):
        return None
    value = container.get(key)
    return value if isinstance(value, dict) else None


def _strings(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def _paths(value: Any) -> list[Path]:
    return [Path(item) for item in _strings(value)]


def _tables(value: Any) -> Iterable[dict[str, Any]]:
    if not isinstance(value, list):
        return ()
    return (item for item in value if isinstance(item, dict))


# --- sections -----------------------------------------------------------------


def _parse_daemon(root: dict[str, Any]) -> DaemonConfig:
    cfg = DaemonConfig()
    if (daemon := _table(root, "daemon")) is not None:
        cfg.log_level = _get_str(daemon, "log_level", cfg.log_level)
        cfg.db_path = Path(_get_str(daemon, "db_path", str(cfg.db_path)))
        threads = _get_int(daemon, "worker_threads")
        if threads is not None:
            cfg.worker_threads = threads & _U64
    return cfg


def _parse_hash(root: dict[str, Any]) -> HashConfig:
    cfg = HashConfig()
    if (section := _table(root, "hash")) is not None:
        name = _get_str(section, "algorithm", "blake3")
        try:
            cfg.algorithm = string_to_algorithm(name)
        except HashError:
            raise _InvalidValue(f"Invalid hash algorithm: {name}") from None
    return cfg


def _parse_monitor(root: dict[str, Any]) -> MonitorConfig:
    cfg = MonitorConfig()
    monitor = _table(root, "monitor")

    if (system := _table(monitor, "system")) is not None:
        cfg.system.paths = _paths(system.get("paths"))
        cfg.system.exclude = _paths(system.get("exclude"))

    if (flatpak := _table(monitor, "flatpak")) is not None:
        cfg.flatpak.enabled = _get_bool(flatpak, "enabled", cfg.flatpak.enabled)
        cfg.flatpak.system = _get_bool(flatpak, "system", cfg.flatpak.system)
        cfg.flatpak.user = _get_bool(flatpak, "user", cfg.flatpak.user)

    if (ostree := _table(monitor, "ostree")) is not None:
        cfg.ostree.enabled = _get_bool(ostree, "enabled", cfg.ostree.enabled)
        cfg.ostree.verify_deployments = _get_bool(
            ostree, "verify_deployments", cfg.ostree.verify_deployments
        )
        cfg.ostree.monitor_object_store = _get_bool(
            ostree, "monitor_object_store", cfg.ostree.monitor_object_store
        )

    if (home := _table(monitor, "home")) is not None:
        cfg.home.enabled = _get_bool(home, "enabled", cfg.home.enabled)
        cfg.home.paths = _paths(home.get("paths"))
        cfg.home.exclude = _paths(home.get("exclude"))

    return cfg


def _parse_alerts(root: dict[str, Any]) -> AlertConfig:
    cfg = AlertConfig()
    if (alerts := _table(root, "alerts")) is not None:
        cfg.journal = _get_bool(alerts, "journal", cfg.journal)
        cfg.dbus = _get_bool(alerts, "dbus", cfg.dbus)
        cfg.socket = _get_bool(alerts, "socket", cfg.socket)
    return cfg


def _parse_scan(root: dict[str, Any]) -> ScanConfig:
    cfg = ScanConfig()
    if (scan := _table(root, "scan")) is not None:
        cfg.schedule = _get_str(scan, "schedule", cfg.schedule)
        cfg.on_boot = _get_bool(scan, "on_boot", cfg.on_boot)
    return cfg


def _parse_matches(value: Any, factory: Callable[[], _T]) -> list[_T]:
    matches = []
    for table in _tables(value):
        match = factory()
        match.field = _get_str(table, "field", "")
        match.pattern = _get_str(table, "pattern", "")
        match.type = _get_str(table, "type", match.type)
        match.negate = _get_bool(table, "negate", match.negate)
        matches.append(match)
    return matches


def _parse_journal(root: dict[str, Any]) -> JournalConfig:
    cfg = JournalConfig()
    journal = _table(root, "journal")
    if journal is None:
        return cfg

    cfg.enabled = _get_bool(journal, "enabled", cfg.enabled)
    priority = _get_int(journal, "max_priority")
    if priority is not None:
        cfg.max_priority = priority & _U8
    cfg.exclude_units = _strings(journal.get("exclude_units"))
    cfg.exclude_identifiers = _strings(journal.get("exclude_identifiers"))

    for table in _tables(journal.get("rules")):
        rule = JournalRuleConfig()
        rule.name = _get_str(table, "name", "")
        rule.description = _get_str(table, "description", "")
        rule.action = _get_str(table, "action", rule.action)
        rule.severity = _get_str(table, "severity", rule.severity)
        rule.enabled = _get_bool(table, "enabled", rule.enabled)
        rule.match = _parse_matches(table.get("match"), JournalFieldMatchConfig)
        cfg.rules.append(rule)
    return cfg


def _parse_correlation(root: dict[str, Any]) -> CorrelationConfig:
    cfg = CorrelationConfig()
    correlation = _table(root, "correlation")
    if correlation is None:
        return cfg

    cfg.enabled = _get_bool(correlation, "enabled", cfg.enabled)
    window = _get_int(correlation, "window_seconds")
    if window is not None:
        cfg.window_seconds = window & _U32

    for table in _tables(correlation.get("rules")):
        rule = CorrelationRuleConfig()
        rule.name = _get_str(table, "name", "")
        rule.event_match = _get_str(table, "event_match", "")
        threshold = _get_int(table, "threshold")
        if threshold is not None:
            rule.threshold = threshold & _U32
        rule_window = _get_int(table, "window_seconds")
        if rule_window is not None:
            rule.window_seconds = rule_window & _U32
        rule.escalated_severity = _get_str(
            table, "escalated_severity", rule.escalated_severity
        )
        cfg.rules.append(rule)
    return cfg


def _parse_audit(root: dict[str, Any]) -> AuditConfig:
    cfg = AuditConfig()
    audit = _table(root, "audit")
    if audit is None:
        return cfg

    cfg.enabled = _get_bool(audit, "enabled", cfg.enabled)
    cfg.sanitize_command_lines = _get_bool(
        audit, "sanitize_command_lines", cfg.sanitize_command_lines
    )
    cfg.exclude_comms = _strings(audit.get("exclude_comms"))
    uids = audit.get("exclude_uids")
    if isinstance(uids, list):
        cfg.exclude_uids = [uid & _U32 for uid in uids if _is_int(uid)]

    for table in _tables(audit.get("rules")):
        rule = AuditRuleConfig()
        rule.name = _get_str(table, "name", "")
        rule.description = _get_str(table, "description", "")
        rule.action = _get_str(table, "action", rule.action)
        rule.severity = _get_str(table, "severity", rule.severity)
        rule.enabled = _get_bool(table, "enabled", rule.enabled)
        syscall = _get_int(table, "syscall_filter")
        if syscall is not None:
            rule.syscall_filter = syscall & _U32
        rule.match = _parse_matches(table.get("match"), AuditFieldMatchConfig)
        cfg.rules.append(rule)
    return cfg


def _parse_home_policy(root: dict[str, Any]) -> HomeMonitoringPolicy:
    cfg = HomeMonitoringPolicy()
    if (home := _table(_table(root, "policy"), "home")) is not None:
        cfg.monitor_users = _strings(home.get("monitor_users"))
        cfg.monitor_groups = _strings(home.get("monitor_groups"))
        cfg.allow_user_opt_out = _get_bool(
            home, "allow_user_opt_out", cfg.allow_user_opt_out
        )
        cfg.mandatory_paths = _strings(home.get("mandatory_paths"))
    return cfg


# --- public API -----------------------------------------------------------------


def parse_config(text: str) -> Config:
    """Parse TOML ``text`` into a Config, filling in defaults.

    Raises ConfigError on syntax errors or invalid values.
    """
    try:
        root = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"TOML parse error: {exc}") from exc

    try:
        return Config(
            daemon=_parse_daemon(root),
            hash=_parse_hash(root),
            monitor=_parse_monitor(root),
            alerts=_parse_alerts(root),
            scan=_parse_scan(root),
            journal=_parse_journal(root),
            correlation=_parse_correlation(root),
            audit=_parse_audit(root),
            home_policy=_parse_home_policy(root),
        )
    except _InvalidValue as exc:
        raise ConfigError(f"Config error: {exc}") from exc


def load_config(path: str | os.PathLike[str]) -> Config:
    """Load and parse the TOML file at ``path``.

    Raises ConfigError if the file cannot be read or is invalid.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ConfigError(f"TOML parse error: {exc}") from exc
    except OSError as exc:
        raise ConfigError(
            "TOML parse error: File could not be opened for reading"
        ) from exc
    return parse_config(text)


def load_config_or_default(path: str | os.PathLike[str]) -> Config:
    """Load ``path``, or return the default Config if it does not exist."""
    if not Path(path).exists():
        return Config()
    return load_config(path)


def _absolute(path: str | os.PathLike[str], home_dir: Path) -> Path:
    candidate = Path(path)
    return candidate if candidate.is_absolute() else home_dir / candidate


def merge_configs(
    system_config: Config,
    policy: HomeMonitoringPolicy,
    user_config: Config | None,
    home_dir: str | os.PathLike[str],
) -> Config:
    """Combine system, policy and user configuration for one user.

    Policy wins over user settings, which win over system settings.
    Relative user paths are resolved against ``home_dir``; mandatory
    policy paths are always monitored and can never be excluded.
    """
    merged = copy.deepcopy(system_config)
    merged.home_policy = copy.deepcopy(policy)

    if user_config is None:
        return merged

    home = Path(home_dir)
    user = user_config
    mandatory = [_absolute(entry, home) for entry in policy.mandatory_paths]

    merged.monitor.home.enabled = user.monitor.home.enabled

    paths = [_absolute(entry, home) for entry in user.monitor.home.paths]
    for required in mandatory:
        if required not in paths:
            paths.append(required)
    merged.monitor.home.paths = paths

    excludes = (_absolute(entry, home) for entry in user.monitor.home.exclude)
    merged.monitor.home.exclude = [
        excl
        for excl in excludes
        if not any(
            excl == required or str(excl).startswith(str(required))
            for required in mandatory
        )
    ]

    if user.hash.algorithm != HashAlgorithm.BLAKE3:
        merged.hash.algorithm = user.hash.algorithm

    merged.alerts.journal = user.alerts.journal
    merged.alerts.dbus = user.alerts.dbus
    merged.alerts.socket = user.alerts.socket

    return merged