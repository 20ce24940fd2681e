"""Exception types raised by the AUC core and its adapters.

Row-level problems never surface as exceptions -- parsers and collections
log and skip them.  What is raised here is either a rejected operation the
caller can recover from (validation, lifecycle misuse) or a structural
failure that should end the run (empty curve, unreadable source).
"""

from __future__ import annotations


class AUCError(Exception):
    """Base class for all aucpr errors."""


class PointValidationError(AUCError, ValueError):
    """A PR/ROC/confusion point lies outside its valid range."""


class CollectionStateError(AUCError, RuntimeError):
    """A confusion collection was used out of lifecycle order."""


class EmptyCurveError(AUCError, RuntimeError):
    """Area, lookup or export was requested on a curve with no points."""


class EmptyInputError(AUCError, ValueError):
    """A source produced no usable examples or points."""


class SourceUnreadableError(AUCError, OSError):
    """The underlying point/record source could not be opened or read."""


class MissingTotalsError(AUCError, ValueError):
    """Positive/negative population totals are required but were not given."""


class ExportError(AUCError, OSError):
    """Curve files could not be written; no partial export is left behind."""
