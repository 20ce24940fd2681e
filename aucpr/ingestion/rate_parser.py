"""Parsers for pre-computed curve coordinates.

Two whitespace/comma separated numbers per line:

- ``pr``  files: ``recall precision``
- ``roc`` files: ``fpr tpr``

Range checks are left to :class:`~aucpr.services.confusion.ConfusionCollection`,
which rejects out-of-range points as they are added.
"""

from __future__ import annotations

from aucpr.ingestion.base_parser import BaseParser, parse_float


class _RatePairParser(BaseParser[tuple[float, float]]):
    """Shared two-column parsing; subclasses only name the columns."""

    columns: tuple[str, str]

    def parse_tokens(self, tokens: list[str]) -> tuple[float, float]:
        if len(tokens) < 2:
            raise ValueError("missing data")
        first, second = self.columns
        return parse_float(tokens[0], first), parse_float(tokens[1], second)


class PRParser(_RatePairParser):
    columns = ("recall", "precision")

    @property
    def format_name(self) -> str:
        return "pr"


class ROCParser(_RatePairParser):
    columns = ("fpr", "tpr")

    @property
    def format_name(self) -> str:
        return "roc"
