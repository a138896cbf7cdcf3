"""Generic exact cover over a named family of subsets."""

from __future__ import annotations
import json
from typing import Any, Dict, Hashable, Iterable, List, Mapping, Sequence

from .base_problem import ExactCoverProblem
from ..core.instance import Column, ColumnKind, Row


class SetFamilyProblem(ExactCoverProblem[List[Hashable]]):
    """
    Pick subsets so every primary item is covered exactly once.

    Secondary items may be covered at most once. The solution is the list
    of chosen subset names in selection order.
    """

    name = "Set family"

    def __init__(
        self,
        primary: Iterable[Hashable],
        subsets: Mapping[Hashable, Iterable[Hashable]],
        secondary: Iterable[Hashable] = (),
        required: Iterable[Hashable] = (),
        **kwargs
    ):
        """
        Args:
            primary: Items that must be covered exactly once.
            subsets: Subset name -> items it contains.
            secondary: Items that may be covered at most once.
            required: Subset names every solution must use.
            **kwargs: Search options passed to ExactCoverProblem.
        """
        super().__init__(**kwargs)
        self.primary = list(primary)
        self.secondary = list(secondary)
        self.subsets: Dict[Hashable, List[Hashable]] = {
            name: list(items) for name, items in subsets.items()
        }
        self.required = list(required)

    @classmethod
    def from_strings(
        cls,
        options: Sequence[str],
        required: Iterable[str],
        optional: Iterable[str] = "",
        **kwargs
    ) -> SetFamilyProblem:
        """
        Build from option strings whose characters are item names.

        ``from_strings(["147", "14"], "1234567")`` has subset "147" covering
        items "1", "4" and "7".
        """
        return cls(
            primary=list(required),
            secondary=list(optional),
            subsets={option: list(option) for option in options},
            **kwargs
        )

    @classmethod
    def from_dict(cls, data: Mapping, **kwargs) -> SetFamilyProblem:
        """Build from ``{"primary": [...], "secondary": [...], "subsets": {...}}``."""
        if "primary" not in data or "subsets" not in data:
            raise ValueError("Set family needs 'primary' and 'subsets' entries")
        subsets = data["subsets"]
        if not isinstance(subsets, Mapping):
            raise ValueError("'subsets' must map subset names to item lists")
        for name, items in subsets.items():
            if not isinstance(items, (list, tuple)):
                raise ValueError(f"Subset {name!r} must be a list of items")
        for key in ("primary", "secondary", "required"):
            if not isinstance(data.get(key, []), (list, tuple)):
                raise ValueError(f"'{key}' must be a list")
        return cls(
            primary=data["primary"],
            subsets=data["subsets"],
            secondary=data.get("secondary", ()),
            required=data.get("required", ()),
            **kwargs
        )

    @classmethod
    def from_json(cls, path: str, **kwargs) -> SetFamilyProblem:
        """Load a set family from a JSON file."""
        with open(path, "r") as f:
            data = json.load(f)
        return cls.from_dict(data, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "primary": self.primary,
            "secondary": self.secondary,
            "subsets": self.subsets,
            "required": self.required,
        }

    def columns(self) -> List[Column]:
        columns = [Column(item) for item in self.primary]
        columns.extend(Column(item, ColumnKind.SECONDARY) for item in self.secondary)
        return columns

    def rows(self) -> List[Row]:
        return [Row(name, items) for name, items in self.subsets.items()]

    def required_rows(self) -> List[Hashable]:
        return self.required

    def decode(self, row_ids: Sequence[Hashable]) -> List[Hashable]:
        return list(row_ids)
