"""
Collection filter/sort engine for policy and report lists.

Filtering keeps an item only if it passes every predicate (text,
category, status). Sorting runs strictly after filtering and only
reorders. Both return new lists; inputs are never changed.
"""

from datetime import date, datetime
from enum import Enum
from typing import Literal, Optional, Sequence, TypeVar
from pydantic import BaseModel, ConfigDict, field_validator

from .errors import ValidationError

T = TypeVar("T")

ALL = "all"

SortDirection = Literal["asc", "desc"]

# Field names used by the dashboard frontend
FIELD_ALIASES = {
    "effectiveDate": "effective_date",
    "lastUpdated": "last_updated",
    "dateSubmitted": "date_submitted",
}


class CollectionQuery(BaseModel):
    """Search box, filter dropdowns and the active sort column."""
    model_config = ConfigDict(frozen=True)

    search_text: str = ""
    category: str = ALL
    status: str = ALL
    sort_field: str = "title"
    sort_direction: SortDirection = "asc"

    @field_validator("sort_field", mode="before")
    @classmethod
    def _canonical_field(cls, value):
        if isinstance(value, str):
            return FIELD_ALIASES.get(value, value)
        return value

    def toggle_sort(self, field: str) -> "CollectionQuery":
        """Clicking the active column flips direction; a new column starts ascending."""
        field = FIELD_ALIASES.get(field, field)
        if field == self.sort_field:
            direction = "desc" if self.sort_direction == "asc" else "asc"
            return self.model_copy(update={"sort_direction": direction})
        return self.model_copy(update={"sort_field": field, "sort_direction": "asc"})


def _status_value(item) -> str:
    status = item.status
    return status.value if isinstance(status, Enum) else str(status)


def matches(item, query: CollectionQuery) -> bool:
    """True when the item passes every predicate of the query."""
    needle = query.search_text.lower()
    if needle and not any(needle in value.lower() for value in item.search_values):
        return False
    if query.category != ALL and item.category != query.category:
        return False
    if query.status != ALL and _status_value(item).lower() != query.status.lower():
        return False
    return True


def filter_items(items: Sequence[T], query: CollectionQuery) -> list[T]:
    """Items passing the query, in their original relative order."""
    return [item for item in items if matches(item, query)]


def _sort_key(value):
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, str):
        return value.casefold()
    if isinstance(value, datetime):
        return value.timestamp()
    if isinstance(value, date):
        return value.toordinal()
    return value


def sort_items(items: Sequence[T], field: str, direction: SortDirection = "asc") -> list[T]:
    """
    Stable sort on one field.

    Strings compare case-insensitively, dates by their point in time.
    Descending reverses the comparison; equal keys keep input order either way.
    """
    if direction not in ("asc", "desc"):
        raise ValidationError(f"Unknown sort direction: {direction}")
    return sorted(items, key=lambda item: _sort_key(getattr(item, field)), reverse=direction == "desc")


def apply_query(items: Sequence[T], query: CollectionQuery, entity: Optional[type] = None) -> list[T]:
    """
    Filter, then sort. The sort field must be sortable for the entity type.

    Pass `entity` so the field is checked even when the list is empty.
    Without it the type comes from the first item, and an empty list has
    nothing to check against.
    """
    if entity is None:
        if not items:
            return []
        entity = type(items[0])

    allowed = getattr(entity, "SORT_FIELDS", ())
    if query.sort_field not in allowed:
        raise ValidationError(f"Cannot sort by {query.sort_field}")

    filtered = filter_items(items, query)
    return sort_items(filtered, query.sort_field, query.sort_direction)


def category_options(items: Sequence) -> list[str]:
    """'all' followed by each distinct category, first-seen order."""
    options = [ALL]
    for item in items:
        if item.category not in options:
            options.append(item.category)
    return options
