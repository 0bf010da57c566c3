"""
Audit Logger for filekit.

Keeps an append-only JSONL record of every filesystem side effect performed
through a FileHandle: what was done, to which path, and whether it worked.
"""

import csv
import io
import json
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Any, Iterator, List, Optional
from enum import Enum


class ActionType(Enum):
    """Types of filesystem actions that can be logged."""
    CREATE = "create"
    OPEN = "open"
    WRITE = "write"
    APPEND = "append"
    DELETE = "delete"


class ActionStatus(Enum):
    """Outcome of a logged action."""
    EXECUTED = "executed"
    FAILED = "failed"


@dataclass
class AuditEntry:
    """Represents a single audit log entry."""
    timestamp: str
    action_type: str
    action_description: str
    target: Optional[str]
    status: str
    result: Optional[str]
    metadata: Dict[str, Any]

    @classmethod
    def create(
        cls,
        action_type: ActionType,
        action_description: str,
        target: Optional[str] = None,
        status: ActionStatus = ActionStatus.EXECUTED,
        result: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> "AuditEntry":
        """Factory method to create an audit entry with current timestamp."""
        return cls(
            timestamp=datetime.now().isoformat(),
            action_type=action_type.value,
            action_description=action_description,
            target=target,
            status=status.value,
            result=result,
            metadata=metadata or {}
        )

    def to_json(self) -> str:
        """Convert entry to JSON string."""
        return json.dumps(asdict(self), ensure_ascii=False)

    @classmethod
    def from_json(cls, json_str: str) -> "AuditEntry":
        """Create entry from JSON string."""
        data = json.loads(json_str)
        return cls(**data)


_CSV_COLUMNS = ["timestamp", "action_type", "action_description", "target", "status", "result"]


class AuditLogger:
    """
    Append-only audit logger.

    Each entry is written as one JSON line and the file is closed again
    straight away, so the log never holds a file open between actions.
    """

    def __init__(self, log_path: str = "data/audit_log.jsonl"):
        """
        Initialize the audit logger.

        Args:
            log_path: Path to the JSONL log file
        """
        self.log_path = Path(log_path)
        self._ensure_log_file()

    def _ensure_log_file(self) -> None:
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        if not self.log_path.exists():
            self.log_path.touch()

    def log(self, entry: AuditEntry) -> None:
        """
        Append an audit entry to the log.

        Args:
            entry: The AuditEntry to log
        """
        with open(self.log_path, "a", encoding="utf-8") as f:
            f.write(entry.to_json() + "\n")

    def log_action(
        self,
        action_type: ActionType,
        description: str,
        target: Optional[str] = None,
        status: ActionStatus = ActionStatus.EXECUTED,
        result: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> AuditEntry:
        """
        Convenience method to create and log an entry in one call.

        Returns the created AuditEntry.
        """
        entry = AuditEntry.create(
            action_type=action_type,
            action_description=description,
            target=target,
            status=status,
            result=result,
            metadata=metadata
        )
        self.log(entry)
        return entry

    def _iter_entries(self) -> Iterator[AuditEntry]:
        """Yield entries oldest first, skipping lines that do not decode."""
        if not self.log_path.exists():
            return

        with open(self.log_path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                try:
                    yield AuditEntry.from_json(line)
                except (json.JSONDecodeError, TypeError):
                    continue

    def _select(
        self,
        predicate: Callable[[AuditEntry], bool],
        limit: int,
        newest_first: bool = False
    ) -> List[AuditEntry]:
        source = self._iter_entries()
        if newest_first:
            source = reversed(list(source))

        entries = []
        for entry in source:
            if len(entries) >= limit:
                break
            if predicate(entry):
                entries.append(entry)
        return entries

    def get_recent(self, limit: int = 100) -> List[AuditEntry]:
        """
        Get the most recent audit entries.

        Args:
            limit: Maximum number of entries to return

        Returns:
            List of AuditEntry objects, most recent first
        """
        if limit <= 0:
            return []
        entries = list(self._iter_entries())
        return list(reversed(entries[-limit:]))

    def get_by_action_type(self, action_type: ActionType, limit: int = 100) -> List[AuditEntry]:
        """Get entries of one action type, oldest first."""
        return self._select(lambda e: e.action_type == action_type.value, limit)

    def get_for_target(self, target: str, limit: int = 100) -> List[AuditEntry]:
        """
        Get every entry recorded against a path.

        Args:
            target: The path as it was passed to the FileHandle
            limit: Maximum number of entries to return
        """
        return self._select(lambda e: e.target == target, limit)

    def get_failed_actions(self, limit: int = 50) -> List[AuditEntry]:
        """Get actions whose filesystem call raised, most recent first."""
        return self._select(
            lambda e: e.status == ActionStatus.FAILED.value, limit, newest_first=True
        )

    def export(self, format: str = "json") -> str:
        """
        Export the entire audit log.

        Args:
            format: Export format ("json" or "csv")

        Returns:
            String containing the exported data
        """
        entries = list(self._iter_entries())

        if format == "json":
            return json.dumps([asdict(e) for e in entries], indent=2)
        elif format == "csv":
            buffer = io.StringIO()
            writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
            writer.writerow(_CSV_COLUMNS)
            for e in entries:
                writer.writerow([
                    e.timestamp, e.action_type, e.action_description,
                    e.target or "", e.status, e.result or "",
                ])
            return buffer.getvalue()
        else:
            raise ValueError(f"Unsupported export format: {format}")

    def clear(self, confirm: bool = False) -> bool:
        """
        Clear the audit log.

        The current log is kept as a timestamped backup next to it.

        Args:
            confirm: Must be True to actually clear the log

        Returns:
            True if cleared, False otherwise
        """
        if not confirm or not self.log_path.exists():
            return False

        stamp = datetime.now().strftime('%Y%m%d_%H%M%S_%f')
        self.log_path.rename(self.log_path.with_suffix(f".backup.{stamp}.jsonl"))
        self.log_path.touch()
        return True
