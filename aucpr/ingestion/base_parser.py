"""Abstract base parser for delimited point-source files."""

from __future__ import annotations

import logging
import math
import re
from abc import ABC, abstractmethod
from collections.abc import Iterator
from pathlib import Path
from typing import Generic, TypeVar

from aucpr.exceptions import SourceUnreadableError
from aucpr.repositories.storage import StorageBackend

logger = logging.getLogger(__name__)

# Fields may be separated by any run of tabs, spaces and commas.
_DELIMITERS = re.compile(r"[\t ,]+")

RecordT = TypeVar("RecordT")


class BaseParser(ABC, Generic[RecordT]):
    """Extension point for point-source formats (``pr``, ``roc``, ``list``).

    Subclasses turn the tokens of one line into one record.  Rows that
    cannot be converted are skipped with a warning and counted in
    :attr:`skipped`; only a source that cannot be opened or decoded stops
    the parse.
    """

    def __init__(self, storage: StorageBackend | None = None) -> None:
        self.storage = storage or StorageBackend()
        self.skipped = 0

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Short identifier for the format, e.g. ``'pr'``, ``'list'``."""
        ...

    @abstractmethod
    def parse_tokens(self, tokens: list[str]) -> RecordT:
        """Convert the tokens of one line into a record.

        Raise ``ValueError`` with a short reason to have the row skipped.
        """
        ...

    def parse(self, file_path: str | Path) -> Iterator[RecordT]:
        """Yield one record per well-formed line of *file_path*."""
        path = str(file_path)
        self.skipped = 0
        try:
            handle = self.storage.open(path, "r", encoding="utf-8")
        except OSError as exc:
            raise SourceUnreadableError(f"Cannot open {path}: {exc}") from exc

        try:
            with handle:
                for line_no, line in enumerate(handle, start=1):
                    line = line.strip()
                    tokens = [t for t in _DELIMITERS.split(line) if t]
                    if not tokens:
                        continue
                    logger.debug("%s:%d: %s", path, line_no, line)
                    try:
                        record = self.parse_tokens(tokens)
                    except ValueError as exc:
                        self.skipped += 1
                        logger.warning(
                            "Skipping bad input line %d of %s (%s)", line_no, path, exc
                        )
                        continue
                    yield record
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceUnreadableError(f"Cannot read {path}: {exc}") from exc

        if self.skipped > 0:
            logger.info(
                "%s import of %s: skipped %d lines", self.format_name, path, self.skipped
            )


def parse_float(token: str, field: str) -> float:
    """Parse *token* as a finite float, naming *field* in the error."""
    try:
        value = float(token)
    except ValueError:
        raise ValueError(f"bad number for {field}: {token!r}") from None
    if not math.isfinite(value):
        raise ValueError(f"non-finite {field}: {token!r}")
    return value
