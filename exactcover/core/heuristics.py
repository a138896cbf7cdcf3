"""Column selection heuristics for Algorithm X."""

from __future__ import annotations
from typing import Callable, Dict, TYPE_CHECKING

if TYPE_CHECKING:
    from .matrix import IncidenceMatrix

ColumnChooser = Callable[["IncidenceMatrix"], int]


def choose_min_size(matrix: IncidenceMatrix) -> int:
    """
    Pick the primary column with the fewest live rows (MRV heuristic).

    Ties go to the column met first when walking the header list, so the
    search order is reproducible. The header list must not be empty.
    """
    R, S = matrix.right, matrix.size

    best = R[0]
    min_size = S[best]
    c = R[best]
    while c != 0 and min_size > 0:
        if S[c] < min_size:
            min_size = S[c]
            best = c
        c = R[c]
    return best


def choose_first(matrix: IncidenceMatrix) -> int:
    """Pick the first primary column in header order."""
    return matrix.right[0]


HEURISTICS: Dict[str, ColumnChooser] = {
    "min-size": choose_min_size,
    "first": choose_first,
}


def get_heuristic(name: str) -> ColumnChooser:
    """Look up a heuristic by name."""
    try:
        return HEURISTICS[name]
    except KeyError:
        raise ValueError(
            f"Unknown heuristic {name!r}, expected one of {sorted(HEURISTICS)}"
        ) from None
