"""Aggregates for the Todo bounded context."""

from todo.domain.aggregates.todo import Todo

__all__ = ["Todo"]
