"""Parser for scored example lists.

Each line holds one example::

    score outcome [weight]

``outcome`` is ``0``/``1`` or ``false``/``true`` (any case).  ``weight``
defaults to 1.0 and must not be negative.
"""

from __future__ import annotations

from aucpr.ingestion.base_parser import BaseParser, parse_float
from aucpr.services.threshold import Example

_OUTCOMES = {"0": 0, "1": 1, "false": 0, "true": 1}


class ListParser(BaseParser[Example]):
    """Stream-parse ``score outcome [weight]`` lines into :class:`Example` records."""

    @property
    def format_name(self) -> str:
        return "list"

    def parse_tokens(self, tokens: list[str]) -> Example:
        score = parse_float(tokens[0], "score")
        if len(tokens) < 2:
            raise ValueError("no outcome token found")

        label = _OUTCOMES.get(tokens[1].lower())
        if label is None:
            raise ValueError(f"unknown outcome of {tokens[1]!r}")

        weight = 1.0
        if len(tokens) > 2:
            weight = parse_float(tokens[2], "weight")
            if weight < 0:
                raise ValueError("weight cannot be negative")

        return Example(score=score, label=label, weight=weight)
