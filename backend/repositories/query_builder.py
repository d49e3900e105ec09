"""
Store-agnostic filter description and its translation to SQLAlchemy clauses.

Entity filter schemas convert themselves into a ``ResourceFilter``; the
repository layer hands that to ``FilterBuilder`` to get WHERE clauses. Nothing
outside this module builds column expressions from user input.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from sqlalchemy import String, and_, cast, func, or_
from sqlalchemy.sql.elements import ColumnElement

LIKE_ESCAPE = "\\"


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user input only ever matches literally."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )


@dataclass
class ResourceFilter:
    """
    Typed filter over one resource table.

    Attributes:
        equals: Column name to exact value.
        contains: Column name to case-insensitive substring.
        ranges: Column name to an inclusive (min, max) pair; either bound may be None.
        any_of: JSON list column name to a value it must contain.
        search: Free text, split into words and matched against the search fields.
    """

    equals: dict[str, Any] = field(default_factory=dict)
    contains: dict[str, str] = field(default_factory=dict)
    ranges: dict[str, tuple[Optional[float], Optional[float]]] = field(
        default_factory=dict
    )
    any_of: dict[str, Any] = field(default_factory=dict)
    search: Optional[str] = None

    def is_empty(self) -> bool:
        return not (
            self.equals or self.contains or self.ranges or self.any_of or self.search
        )


class FilterBuilder:
    """Translate a ``ResourceFilter`` into SQLAlchemy clauses for one model."""

    def __init__(self, model: type, search_fields: tuple[str, ...] = ()):
        self.model = model
        self.search_fields = search_fields or getattr(model, "__search_fields__", ())

    def _column(self, name: str):
        column = getattr(self.model, name, None)
        if column is None:
            raise ValueError(f"{self.model.__name__} has no column '{name}'")
        return column

    def search_clause(self, term: str) -> Optional[ColumnElement[bool]]:
        """OR of every (word, search field) pair, matched case-insensitively."""
        words = [word for word in term.split() if word]
        if not words or not self.search_fields:
            return None

        matches = []
        for word in words:
            pattern = f"%{escape_like(word.lower())}%"
            for name in self.search_fields:
                column = self._column(name)
                matches.append(func.lower(column).like(pattern, escape=LIKE_ESCAPE))
        return or_(*matches)

    def build(self, resource_filter: ResourceFilter) -> list[ColumnElement[bool]]:
        clauses: list[ColumnElement[bool]] = []

        for name, value in resource_filter.equals.items():
            clauses.append(self._column(name) == value)

        for name, value in resource_filter.contains.items():
            pattern = f"%{escape_like(value.lower())}%"
            clauses.append(
                func.lower(self._column(name)).like(pattern, escape=LIKE_ESCAPE)
            )

        for name, (low, high) in resource_filter.ranges.items():
            column = self._column(name)
            bounds = []
            if low is not None:
                bounds.append(column >= low)
            if high is not None:
                bounds.append(column <= high)
            if bounds:
                clauses.append(and_(*bounds))

        for name, value in resource_filter.any_of.items():
            # JSON list columns: match the serialized element, quotes included
            value = getattr(value, "value", value)
            pattern = f'%"{escape_like(str(value))}"%'
            clauses.append(
                cast(self._column(name), String).like(pattern, escape=LIKE_ESCAPE)
            )

        if resource_filter.search:
            clause = self.search_clause(resource_filter.search)
            if clause is not None:
                clauses.append(clause)

        return clauses
