"""Server settings and their loading from an INI configuration file."""

from __future__ import annotations

import configparser
import logging
from dataclasses import dataclass, field
from pathlib import Path

from .replication_config import ReplicationConfig

logger = logging.getLogger(__name__)

TRACE = 5

_LOG_LEVELS = {
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": TRACE,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

_TRUE = frozenset({"true", "yes", "on", "1"})
_FALSE = frozenset({"false", "no", "off", "0"})


def _parse_int(key: str, value: str, *, signed: bool = False) -> int:
    try:
        number = int(value.strip())
    except ValueError:
        raise ValueError(f"invalid number for `{key}`: {value!r}") from None
    if not signed and number < 0:
        raise ValueError(f"`{key}` must not be negative: {value!r}")
    return number


def _parse_bool(key: str, value: str) -> bool:
    text = value.strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"invalid boolean for `{key}`: {value!r}")


def _parse_log_level(value: str) -> int:
    level = _LOG_LEVELS.get(value.lower())
    if level is None:
        logger.warning("invalid log level `%s`. Using default `info`", value)
        return logging.INFO
    return level


@dataclass
class GeneralSettings:
    """General server settings. TLS is on when both `cert` and `key` are set."""

    port: int = 6379
    listen_ip: str = "127.0.0.1"
    replication_listen_ip: str = "127.0.0.1"
    workers: int = 0
    log_level: int = logging.INFO
    cert: Path | None = None
    key: Path | None = None
    config_dir: Path | None = None


@dataclass
class ReplicationLimits:
    """Limits on the size and pace of replication messages."""

    single_update_buffer_size: int = 50 << 20
    num_updates_per_message: int = 10_000
    check_for_updates_interval_ms: int = 5


@dataclass
class ClientLimits:
    """Per-client limits."""

    client_response_buffer_size: int = 1 << 20


@dataclass
class RocksDbParams:
    """Tuning parameters of the storage engine."""

    max_background_jobs: int = 8
    max_write_buffer_number: int = 4
    write_buffer_size: int = 256 << 20
    wal_ttl_seconds: int = 3600
    compression_enabled: bool = True
    disable_wal: bool = False
    manual_wal_flush: bool = False
    max_open_files: int = -1


@dataclass
class StorageOpenParams:
    """Where the database lives and how the storage engine is tuned."""

    db_path: Path = field(default_factory=lambda: Path("sabledb.db"))
    rocksdb: RocksDbParams = field(default_factory=RocksDbParams)


@dataclass
class ServerOptions:
    """All server options."""

    general_settings: GeneralSettings = field(default_factory=GeneralSettings)
    open_params: StorageOpenParams = field(default_factory=StorageOpenParams)
    replication_limits: ReplicationLimits = field(default_factory=ReplicationLimits)
    client_limits: ClientLimits = field(default_factory=ClientLimits)

    def use_tls(self) -> bool:
        return self.general_settings.key is not None and self.general_settings.cert is not None

    def load_replication_config(self) -> ReplicationConfig:
        """Load the replication config from disk, defaulting to primary mode."""
        settings = self.general_settings
        return ReplicationConfig.from_dir(
            settings.config_dir,
            settings.replication_listen_ip,
            (settings.port & 0xFFFF) + 1000,
        )

    @classmethod
    def from_config(cls, config_file: str | Path) -> ServerOptions:
        """Read options from an INI file; unknown keys are ignored."""
        parser = configparser.ConfigParser(interpolation=None, strict=False)
        parser.optionxform = str  # keys are case-sensitive
        with open(config_file, encoding="utf-8") as handle:
            parser.read_file(handle)

        options = cls()
        if parser.has_section("rocksdb"):
            options._apply_rocksdb(parser["rocksdb"])
        if parser.has_section("general"):
            options._apply_general(parser["general"])
        if parser.has_section("replication_limits"):
            options._apply_replication_limits(parser["replication_limits"])
        if parser.has_section("client_limits"):
            value = parser["client_limits"].get("client_response_buffer_size")
            if value is not None:
                options.client_limits.client_response_buffer_size = _parse_int(
                    "client_response_buffer_size", value
                )
        return options

    def _apply_rocksdb(self, section: configparser.SectionProxy) -> None:
        rocks = self.open_params.rocksdb
        unsigned = (
            "max_background_jobs",
            "max_write_buffer_number",
            "write_buffer_size",
            "wal_ttl_seconds",
        )
        flags = ("compression_enabled", "disable_wal", "manual_wal_flush")
        for key, value in section.items():
            if key in unsigned:
                setattr(rocks, key, _parse_int(key, value))
            elif key in flags:
                setattr(rocks, key, _parse_bool(key, value))
            elif key == "max_open_files":
                rocks.max_open_files = _parse_int(key, value, signed=True)

    def _apply_general(self, section: configparser.SectionProxy) -> None:
        settings = self.general_settings
        for key, value in section.items():
            if key == "db_path":
                self.open_params.db_path = Path(value)
            elif key == "config_dir":
                settings.config_dir = Path(value)
            elif key == "port":
                settings.port = _parse_int(key, value)
            elif key == "listen_ip":
                settings.listen_ip = value
            elif key == "workers":
                settings.workers = _parse_int(key, value)
            elif key == "log_level":
                settings.log_level = _parse_log_level(value)
            elif key == "cert":
                settings.cert = Path(value)
            elif key == "key":
                settings.key = Path(value)

    def _apply_replication_limits(self, section: configparser.SectionProxy) -> None:
        limits = self.replication_limits
        for key, value in section.items():
            if key in (
                "single_update_buffer_size",
                "num_updates_per_message",
                "check_for_updates_interval_ms",
            ):
                setattr(limits, key, _parse_int(key, value))