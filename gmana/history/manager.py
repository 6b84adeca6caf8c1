"""
Password history stored as a JSON log in the gmana home directory.

Entries are kept newest first and truncated to a fixed limit. Passwords
are stored in plain text.
"""

import json
import logging
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..config.manager import DEFAULT_HISTORY_LIMIT, resolve_home
from ..exceptions import HistoryError
from ..utils.validation import PasswordOptions, is_strict_int

logger = logging.getLogger(__name__)

HISTORY_FILENAME = "history.json"

# Option fields recorded with each entry
HISTORY_OPTION_FIELDS = (
    "length",
    "include_uppercase",
    "include_lowercase",
    "include_numbers",
    "include_symbols",
    "include_extra_symbols",
)


@dataclass
class HistoryEntry:
    """A generated password and the options it was generated with."""

    password: str
    options: Dict[str, Any]
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "HistoryEntry":
        """
        Build an entry from its stored form.

        Raises:
            ValueError: If a field is missing or has the wrong type
        """
        if not isinstance(raw, dict):
            raise ValueError("history entry is not an object")

        for name in ("id", "password", "created_at"):
            if not isinstance(raw.get(name), str):
                raise ValueError(f"history entry field '{name}' must be a string")

        options = raw.get("options")
        if not isinstance(options, dict):
            raise ValueError("history entry field 'options' must be an object")

        for name in HISTORY_OPTION_FIELDS:
            value = options.get(name)
            valid = is_strict_int(value) if name == "length" else isinstance(value, bool)
            if not valid:
                raise ValueError(f"history option '{name}' has an invalid value")

        return cls(
            id=raw["id"],
            password=raw["password"],
            options={name: options[name] for name in HISTORY_OPTION_FIELDS},
            created_at=raw["created_at"],
        )

    @property
    def created_datetime(self) -> Optional[datetime]:
        """Creation time as a datetime, or None if unparseable."""
        try:
            return datetime.fromisoformat(self.created_at)
        except ValueError:
            return None

    def to_dict(self) -> Dict[str, Any]:
        """Return the entry in its stored form."""
        return asdict(self)


class HistoryManager:
    """Append, list and clear the password history file."""

    def __init__(self, home: Optional[Union[str, Path]] = None,
                 limit: int = DEFAULT_HISTORY_LIMIT):
        """
        Initialize history manager.

        Args:
            home: Directory holding history.json
            limit: Maximum number of entries kept, at most 100
        """
        self.home = resolve_home(home)
        self.history_file = self.home / HISTORY_FILENAME
        self.limit = max(0, min(limit, DEFAULT_HISTORY_LIMIT))

    def load(self) -> List[HistoryEntry]:
        """
        Load history entries, newest first.

        Returns:
            List of entries, empty if the file is missing or invalid
        """
        if not self.history_file.exists():
            return []

        try:
            with open(self.history_file, "r", encoding="utf-8") as f:
                raw = json.load(f)

            if not isinstance(raw, list):
                logger.warning("Invalid history file: not a list")
                return []

            return [HistoryEntry.from_dict(item) for item in raw]

        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load history: {e}")
            return []

    def add(self, password: str, options: PasswordOptions) -> HistoryEntry:
        """
        Record a generated password.

        Args:
            password: The generated password
            options: Options used to generate it

        Returns:
            The new entry

        Raises:
            HistoryError: If history is disabled or the file cannot be written
        """
        if self.limit == 0:
            raise HistoryError("History is disabled (limit is 0)")

        recorded = options.to_dict()
        entry = HistoryEntry(
            password=password,
            options={name: recorded[name] for name in HISTORY_OPTION_FIELDS},
        )

        history = self.load()
        history.insert(0, entry)
        self._write(history[:self.limit])

        logger.debug(f"History entry {entry.id} saved")
        return entry

    def get(self, entry_id: str) -> Optional[HistoryEntry]:
        """
        Find an entry by id.

        Args:
            entry_id: Entry identifier

        Returns:
            Matching entry or None
        """
        for entry in self.load():
            if entry.id == entry_id:
                return entry
        return None

    def clear(self) -> bool:
        """
        Delete the history file.

        Returns:
            True if a file was removed, False if there was none

        Raises:
            HistoryError: If the file exists but cannot be removed
        """
        if not self.history_file.exists():
            return False

        try:
            self.history_file.unlink()
        except OSError as e:
            raise HistoryError(f"Failed to clear history: {e}") from e

        logger.debug(f"History cleared: {self.history_file}")
        return True

    def _write(self, entries: List[HistoryEntry]) -> None:
        """Write entries to disk, creating the home directory if needed."""
        try:
            self.home.mkdir(parents=True, exist_ok=True)
            with open(self.history_file, "w", encoding="utf-8") as f:
                json.dump([entry.to_dict() for entry in entries], f, indent=2)
                f.write("\n")
        except OSError as e:
            raise HistoryError(f"Failed to save history: {e}") from e


def mask_password(password: str) -> str:
    """
    Mask all but the first and last two characters.

    Args:
        password: Password to mask

    Returns:
        Masked password, or a fixed mask for short passwords
    """
    if len(password) <= 4:
        return "•" * 4

    return password[:2] + "•" * (len(password) - 4) + password[-2:]


def format_options(options: Dict[str, Any]) -> str:
    """Short summary of recorded options, e.g. 'L:12 A-Z a-z 0-9'."""
    parts = [f"L:{options.get('length')}"]

    if options.get("include_uppercase"):
        parts.append("A-Z")
    if options.get("include_lowercase"):
        parts.append("a-z")
    if options.get("include_numbers"):
        parts.append("0-9")
    if options.get("include_symbols"):
        parts.append("!@#")
    if options.get("include_extra_symbols"):
        parts.append("[]{}")

    return " ".join(parts)


def get_history_manager(home: Optional[Union[str, Path]] = None,
                        limit: int = DEFAULT_HISTORY_LIMIT) -> HistoryManager:
    """
    Get a configured history manager instance.

    Args:
        home: Optional home directory override
        limit: Maximum number of entries kept

    Returns:
        HistoryManager instance
    """
    return HistoryManager(home=home, limit=limit)
