"""Abstract exact cover instances: constraint columns and candidate rows."""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Hashable, Iterable, List, Tuple


class ColumnKind(Enum):
    """Whether a constraint must be covered exactly once or at most once."""
    PRIMARY = "primary"
    SECONDARY = "secondary"


@dataclass(frozen=True)
class Column:
    """A single constraint of an exact cover instance."""
    id: Hashable
    kind: ColumnKind = ColumnKind.PRIMARY

    @property
    def primary(self) -> bool:
        return self.kind is ColumnKind.PRIMARY

    @classmethod
    def secondary(cls, column_id: Hashable) -> Column:
        return cls(column_id, ColumnKind.SECONDARY)


@dataclass(frozen=True)
class Row:
    """A candidate choice and the column ids it satisfies."""
    id: Hashable
    column_ids: Tuple[Hashable, ...]

    def __post_init__(self):
        # Accept any iterable but keep a stable, immutable order
        object.__setattr__(self, "column_ids", tuple(self.column_ids))


class MalformedInstance(ValueError):
    """
    Raised when an instance cannot be turned into a matrix.

    Attributes:
        row_id: The offending row, if the defect belongs to one.
        column_id: The offending column, if the defect names one.
    """

    def __init__(self, message: str, row_id: Any = None, column_id: Any = None):
        super().__init__(message)
        self.row_id = row_id
        self.column_id = column_id


def normalize_columns(columns: Iterable[Any]) -> List[Column]:
    """Coerce bare ids to primary columns."""
    return [c if isinstance(c, Column) else Column(c) for c in columns]


def normalize_rows(rows: Iterable[Any]) -> List[Row]:
    """Coerce ``(id, column_ids)`` pairs to rows."""
    normalized = []
    for r in rows:
        if isinstance(r, Row):
            normalized.append(r)
        else:
            row_id, column_ids = r
            normalized.append(Row(row_id, column_ids))
    return normalized
