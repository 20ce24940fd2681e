"""Lookup of point-source parsers by format name."""

from __future__ import annotations

from aucpr.ingestion.base_parser import BaseParser
from aucpr.ingestion.list_parser import ListParser
from aucpr.ingestion.rate_parser import PRParser, ROCParser
from aucpr.repositories.storage import StorageBackend

_PARSERS: dict[str, type[BaseParser]] = {
    "list": ListParser,
    "pr": PRParser,
    "roc": ROCParser,
}

SOURCE_FORMATS: tuple[str, ...] = tuple(_PARSERS)


def get_parser(fmt: str, storage: StorageBackend | None = None) -> BaseParser:
    """Return a parser instance for *fmt* (case-insensitive)."""
    try:
        parser_cls = _PARSERS[fmt.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown source format {fmt!r}; expected one of {', '.join(SOURCE_FORMATS)}"
        ) from None
    return parser_cls(storage)
