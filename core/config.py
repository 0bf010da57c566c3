"""
Configuration for filekit.

Settings live in a YAML document under a top-level ``filekit`` key:

    filekit:
      encoding: utf-8
      audit:
        enabled: true
        log_path: data/audit_log.jsonl
      finder:
        brace_expansion: true
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .logger import AuditLogger


ROOT_KEY = "filekit"


@dataclass
class FileKitConfig:
    """Effective filekit settings."""
    encoding: str = "utf-8"
    audit_enabled: bool = True
    audit_log_path: str = "data/audit_log.jsonl"
    brace_expansion: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FileKitConfig":
        """Build a config from the mapping under the ``filekit`` key."""
        defaults = cls()
        audit = data.get("audit")
        finder = data.get("finder")
        if not isinstance(audit, dict):
            audit = {}
        if not isinstance(finder, dict):
            finder = {}
        return cls(
            encoding=str(data.get("encoding", defaults.encoding)),
            audit_enabled=bool(audit.get("enabled", defaults.audit_enabled)),
            audit_log_path=str(audit.get("log_path", defaults.audit_log_path)),
            brace_expansion=bool(finder.get("brace_expansion", defaults.brace_expansion)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "encoding": self.encoding,
            "audit": {
                "enabled": self.audit_enabled,
                "log_path": self.audit_log_path,
            },
            "finder": {
                "brace_expansion": self.brace_expansion,
            },
        }

    def make_logger(self) -> Optional[AuditLogger]:
        """Return an AuditLogger for these settings, or None if auditing is off."""
        if not self.audit_enabled:
            return None
        return AuditLogger(log_path=self.audit_log_path)


def load_config(config_path: str = "config.yaml") -> FileKitConfig:
    """
    Load configuration from a YAML file.

    A missing, unreadable or malformed file yields the defaults.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        The effective FileKitConfig
    """
    path = Path(config_path)
    if not path.exists():
        return FileKitConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            document = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return FileKitConfig()

    if not isinstance(document, dict):
        return FileKitConfig()

    section = document.get(ROOT_KEY, document)
    if not isinstance(section, dict):
        return FileKitConfig()
    return FileKitConfig.from_dict(section)


def save_config(config: FileKitConfig, config_path: str = "config.yaml") -> None:
    """
    Save configuration to a YAML file.

    Other top-level keys already present in the file are kept.
    """
    path = Path(config_path)
    document: Dict[str, Any] = {}

    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            existing = yaml.safe_load(f)
        if isinstance(existing, dict):
            document = existing

    document[ROOT_KEY] = config.to_dict()

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(document, f, default_flow_style=False)
