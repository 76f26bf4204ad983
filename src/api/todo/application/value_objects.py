"""Application-layer value objects for the Todo bounded context."""

from __future__ import annotations

from dataclasses import dataclass, field

from todo.domain.aggregates import Todo

DEFAULT_PAGE_LIMIT = 20
MAX_PAGE_LIMIT = 100


@dataclass(frozen=True)
class PageRequest:
    """Normalized pagination window.

    A non-positive limit falls back to the default, a limit above the
    maximum is capped, and a negative offset starts from the beginning.
    """

    limit: int
    offset: int

    @classmethod
    def of(cls, limit: int, offset: int) -> PageRequest:
        """Build a page request from raw caller input."""
        if limit <= 0:
            limit = DEFAULT_PAGE_LIMIT
        return cls(limit=min(limit, MAX_PAGE_LIMIT), offset=max(offset, 0))


@dataclass(frozen=True)
class Creator:
    """Display information about the user who created a todo."""

    id: str
    name: str


@dataclass(frozen=True)
class TodoPage:
    """One page of todos together with the total matching count.

    Attributes:
        todos: Todos on this page, newest first
        total: Number of todos matching the listing, across all pages
        page: The normalized window that produced this page
        creators: Creator info keyed by user ID (public listings only)
    """

    todos: list[Todo]
    total: int
    page: PageRequest
    creators: dict[str, Creator] = field(default_factory=dict)
