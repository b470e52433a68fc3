"""Persistent replication role and address, kept in `replication.json`."""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

REPLICATION_CONF = "replication.json"

_FILE_LOCK = threading.Lock()


class ServerRole(Enum):
    """Replication role of a server."""

    PRIMARY = "Primary"
    REPLICA = "Replica"


def _file_path_from_dir(configuration_dir: str | Path | None) -> Path:
    if configuration_dir is not None:
        base = Path(configuration_dir)
    else:
        try:
            base = Path.cwd()
        except OSError:
            base = Path(".")
    return base / REPLICATION_CONF


@dataclass
class ReplicationConfig:
    """Role plus address.

    For a replica, `ip` and `port` locate the primary; for a primary they are
    where it accepts replication clients.
    """

    role: ServerRole = ServerRole.PRIMARY
    ip: str = "127.0.0.1"
    port: int = 7379

    @classmethod
    def primary_config(cls, ip: str, port: int) -> ReplicationConfig:
        return cls(role=ServerRole.PRIMARY, ip=ip, port=port)

    def to_json(self) -> str:
        """Pretty-printed JSON form as stored on disk."""
        return json.dumps(
            {"role": self.role.value, "ip": self.ip, "port": self.port}, indent=2
        )

    @classmethod
    def from_json(cls, text: str) -> ReplicationConfig:
        """Decode the JSON form; raise `ValueError` if it is malformed."""
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("replication config must be a JSON object")
        try:
            role = ServerRole(data["role"])
            ip = data["ip"]
            port = data["port"]
        except KeyError as exc:
            raise ValueError(f"missing field {exc}") from None
        if not isinstance(ip, str):
            raise ValueError("`ip` must be a string")
        if isinstance(port, bool) or not isinstance(port, int) or not 0 <= port <= 0xFFFF:
            raise ValueError("`port` must be an integer between 0 and 65535")
        return cls(role=role, ip=ip, port=port)

    @classmethod
    def from_dir(
        cls,
        configuration_dir: str | Path | None,
        default_listen_ip: str,
        default_port: int,
    ) -> ReplicationConfig:
        """Load the config from `configuration_dir` (or the working directory).

        A missing or unreadable file yields a primary config built from the
        defaults. The resulting config is written back to the file.
        """
        with _FILE_LOCK:
            path = _file_path_from_dir(configuration_dir)
            conf = cls.primary_config(default_listen_ip, default_port)
            try:
                content = path.read_text()
            except FileNotFoundError:
                pass
            except OSError as exc:
                logger.warning("Could not read file: %s. %s", path, exc)
            else:
                logger.info("Parsing replication config: %s", content)
                try:
                    conf = cls.from_json(content)
                except ValueError as exc:
                    logger.warning(
                        "Failed to de-serialize replication config from file %s. %s",
                        path,
                        exc,
                    )
            try:
                conf._write_unlocked(configuration_dir)
            except OSError as exc:
                logger.debug("Failed to update %s. %s", path, exc)
            return conf

    def write_file(self, configuration_dir: str | Path | None) -> None:
        """Write this config to the file, replacing its previous content."""
        with _FILE_LOCK:
            self._write_unlocked(configuration_dir)

    def _write_unlocked(self, configuration_dir: str | Path | None) -> None:
        path = _file_path_from_dir(configuration_dir)
        logger.debug("Updating %s", path)
        text = self.to_json()
        path.write_text(text)
        logger.debug("%s updated successfully with content:\n%s", path, text)