"""Append-only ledger files and the directory loader.

One ledger file is written per run. The ledger is whatever the ledger
directory holds: loading is a fold over its files, with no index or manifest.
"""

from datetime import datetime
from pathlib import Path
from types import TracebackType
from typing import TextIO

from divvy.dates import ledger_file_name, parse_ledger_file_name
from divvy.domain.assignment import LedgerEntry
from divvy.logging_setup import get_logger
from divvy.store.codec import LedgerDecodeError, decode_entries, encode_entry

logger = get_logger(__name__)


class LedgerFile:
    """A ledger file open for appending entries.

    Use LedgerFile.create() for a fresh file or LedgerFile.open_latest() to
    continue the most recent one.
    """

    def __init__(self, path: Path, handle: TextIO, created: bool) -> None:
        self.path = path
        self.created = created
        self._handle = handle
        self.written = 0

    @classmethod
    def create(cls, directory: Path, now: datetime | None = None) -> "LedgerFile":
        """Create a new ledger file named after the creation time.

        Args:
            directory: Ledger directory.
            now: Creation time. Defaults to the current time.

        Returns:
            Open LedgerFile.

        Raises:
            FileExistsError: If a ledger file with the same name exists, e.g.
                when two files are created within the same second.
        """
        if now is None:
            now = datetime.now()
        path = directory / ledger_file_name(now)
        handle = open(path, "x", encoding="utf-8")
        logger.debug("Created ledger file %s", path)
        return cls(path, handle, created=True)

    @classmethod
    def open(cls, path: Path) -> "LedgerFile":
        """Open an existing ledger file for appending.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        if not path.is_file():
            raise FileNotFoundError(f"Ledger file not found: {path}")
        handle = open(path, "a", encoding="utf-8")
        logger.debug("Continuing ledger file %s", path)
        return cls(path, handle, created=False)

    @classmethod
    def open_latest(cls, directory: Path) -> "LedgerFile":
        """Open the most recently created ledger file for appending.

        Raises:
            FileNotFoundError: If the directory holds no ledger file.
        """
        latest = find_latest_ledger_file(directory)
        if latest is None:
            raise FileNotFoundError(f"No ledger file to continue in {directory}")
        return cls.open(latest)

    def write(self, entry: LedgerEntry) -> None:
        """Append one entry with a single write call and flush it."""
        self._handle.write(encode_entry(entry))
        self._handle.flush()
        self.written += 1

    def close(self) -> None:
        self._handle.close()

    def discard_if_empty(self) -> bool:
        """Close, then delete the file if this run created it and wrote nothing.

        Returns:
            True if the file was deleted.
        """
        self.close()
        if self.created and self.written == 0 and self.path.stat().st_size == 0:
            self.path.unlink()
            logger.debug("Removed empty ledger file %s", self.path)
            return True
        return False

    def __enter__(self) -> "LedgerFile":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def _visible_files(directory: Path) -> list[Path]:
    """Non-hidden regular files of a directory in name order, logging skips."""
    files: list[Path] = []
    for path in sorted(directory.iterdir()):
        if path.name.startswith("."):
            logger.warning("'%s' is hidden, skipping", path.name)
        elif path.is_dir():
            logger.warning("'%s' is not a file, skipping", path.name)
        else:
            files.append(path)
    return files


def find_latest_ledger_file(directory: Path) -> Path | None:
    """Find the ledger file with the newest creation timestamp in its name.

    Files whose names are not ledger timestamps are skipped with a warning.

    Returns:
        Path of the latest ledger file, or None if there is none.
    """
    latest: Path | None = None
    latest_time: datetime | None = None
    for path in _visible_files(directory):
        try:
            created = parse_ledger_file_name(path.name)
        except ValueError:
            logger.warning("'%s' is not named like a ledger file, skipping", path.name)
            continue
        if latest_time is None or created > latest_time:
            latest, latest_time = path, created
    return latest


def list_ledger_files(directory: Path) -> list[Path]:
    """Every non-hidden, non-directory file of the ledger directory."""
    return _visible_files(directory)


def load_ledger_file(path: Path) -> list[LedgerEntry]:
    """Load every entry of one ledger file, in append order.

    Raises:
        OSError: If the file cannot be read.
        LedgerDecodeError: If a record fails to decode. Nothing is truncated
            silently.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise LedgerDecodeError(f"failed to load ledger file '{path}': not UTF-8 text ({e.reason})") from e
    try:
        return list(decode_entries(text))
    except LedgerDecodeError as e:
        raise LedgerDecodeError(f"failed to load ledger file '{path}': {e}") from e


def load_ledger(directory: Path) -> list[LedgerEntry]:
    """Load and concatenate the entries of every ledger file in a directory.

    Hidden files and subdirectories are skipped with a warning.

    Raises:
        OSError: If the directory or a file cannot be read.
        LedgerDecodeError: If any file holds an undecodable record.
    """
    entries: list[LedgerEntry] = []
    for path in _visible_files(directory):
        entries.extend(load_ledger_file(path))
    logger.debug("Loaded %d ledger entries from %s", len(entries), directory)
    return entries
