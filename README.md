# vigilant_canine

Core pieces of a host-level intrusion detection system for Linux:

- **File hashing** with BLAKE3 (the default) or SHA-256.
- **Distribution detection**: reads `os-release` and tells a traditional
  package-managed system from an OSTree system or a Btrfs snapshot system.
- **Configuration**: loads TOML files into typed dataclasses with defaults,
  and merges a system configuration, a home-monitoring policy and a user's
  own configuration.

The package needs nothing beyond the Python standard library and runs on
Python 3.11 or later. Install the `test` extra to run the tests with pytest.

## Modules

| Module | Contents |
| --- | --- |
| `vigilant_canine.model` | Enums `HashAlgorithm`, `Severity`, `DistroType` |
| `vigilant_canine.hashing` | `hash_bytes`, `hash_file`, `algorithm_to_string`, `string_to_algorithm`, `HashError` |
| `vigilant_canine.detector` | `detect_distro`, `parse_os_release`, `is_ostree_system`, `is_btrfs_snapshot_system`, `distro_type_name`, `DistroInfo`, `DistroDetectionError` |
| `vigilant_canine.config_types` | Configuration dataclasses, with `Config` at the top |
| `vigilant_canine.config` | `parse_config`, `load_config`, `load_config_or_default`, `merge_configs`, `ConfigError` |

## Hashing

```python
from vigilant_canine.hashing import hash_bytes, hash_file, string_to_algorithm
from vigilant_canine.model import HashAlgorithm

hash_bytes(b"hello world", HashAlgorithm.SHA256)
# 'b94d27b9934d3e08a52e52d7da7dabfac484efe37a5380ee9088f7ace2efcde9'

hash_bytes(b"hello world", HashAlgorithm.BLAKE3)
# 'd74981efa70a0c880b8d8c1985d075dbcbf679b99a5f9914e5aaf96b831a9e24'

digest = hash_file("/etc/hostname", string_to_algorithm("blake3"))
```

Digests are lower-case hex strings; BLAKE3 gives the standard 32-byte digest.
`hash_file` reads the file in 1 MiB chunks. It raises `HashError` when the
file cannot be opened ("Failed to open file: ...") or read.
`string_to_algorithm` raises `HashError` for a name other than `blake3` or
`sha256`. `algorithm_to_string` returns the name of an algorithm, or
`"unknown"` for a value it does not recognise.

## Distribution detection

```python
from vigilant_canine.detector import detect_distro, distro_type_name

info = detect_distro()
print(info.name, info.version, info.variant, distro_type_name(info.type))
```

`detect_distro` reads `/etc/os-release` (or `/usr/lib/os-release` when the
first does not exist), then classifies the system in this order:

1. If `/ostree` exists and an executable `ostree` is on `PATH`:
   `DistroType.OSTREE`.
2. Otherwise, if `/` is mounted as `btrfs` according to `/proc/self/mounts`
   and `snapper` or `transactional-update` is on `PATH`:
   `DistroType.BTRFS_SNAPSHOT`.
3. Otherwise: `DistroType.TRADITIONAL`.

`parse_os_release(path=None)` reads an `os-release` style file on its own.
It takes `NAME`, `VERSION_ID` and `VARIANT` or `VARIANT_ID` (whichever comes
last), strips one pair of matching quotes, and skips blank lines and
comments. It raises `DistroDetectionError` when the file cannot be opened or
has no `NAME`.

## Configuration

```python
from vigilant_canine.config import load_config_or_default, parse_config

config = load_config_or_default("/etc/vigilant-canine/config.toml")
print(config.daemon.db_path, config.hash.algorithm, config.scan.schedule)

user = parse_config("""
[monitor.home]
enabled = true
paths = [".local/bin", ".cargo/bin"]
""")
```

- `parse_config(text)` parses a TOML string.
- `load_config(path)` reads and parses a file.
- `load_config_or_default(path)` returns a default `Config()` when the file
  does not exist, and otherwise behaves like `load_config`.

All three raise `ConfigError` for a file that cannot be read, malformed TOML
or an invalid `[hash] algorithm`. Keys that are missing or have the wrong
type keep their defaults; array elements of the wrong type are skipped.

The sections read are `[daemon]`, `[hash]`, `[monitor.system]`,
`[monitor.flatpak]`, `[monitor.ostree]`, `[monitor.home]`, `[alerts]`,
`[scan]`, `[journal]` with `[[journal.rules]]` and their `match` tables,
`[correlation]` with `[[correlation.rules]]`, `[audit]` with
`[[audit.rules]]` and their `match` tables, and `[policy.home]`.

### Merging user configuration

```python
from pathlib import Path
from vigilant_canine.config import merge_configs

merged = merge_configs(config, config.home_policy, user, Path("/home/alice"))
```

`merge_configs` returns a new `Config`; its inputs are not changed. The
policy given is always stored as `home_policy`. With no user configuration
(`None`) the result is otherwise the system configuration. With one:

- **Monitoring switch**: the user's `monitor.home.enabled` is taken.
- **Relative paths**: the user's home paths and exclusions are resolved
  against the home directory.
- **Mandatory paths**: the policy's `mandatory_paths` (resolved the same way)
  are appended when not already listed, and any exclusion equal to one of
  them or whose text starts with one of them is dropped.
- **Hash algorithm**: the user's choice is taken only when it is not BLAKE3.
- **Alert channels**: the user's `journal`, `dbus` and `socket` settings are
  taken.

## What this package does not do

It provides building blocks only. There is no command-line program or daemon,
no file or log monitoring, no scanning of directories into baselines, no
database storage of baselines or alerts, and no alert delivery. The
`Severity` enum and the journal, correlation and audit rule settings are
parsed and held as data; nothing in the package acts on them.