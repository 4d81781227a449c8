"""Result monad for explicit error handling in tracker operations.

Every fallible operation in taskboard (store lookups, remote calls, task
and project mutations) returns either ``Ok(value)`` or ``Err(error)``.
Expected failures such as a missing project or a rejected remote call are
values the caller inspects, not exceptions it has to remember to catch.

Example usage:
    >>> def find_task(tasks: dict[str, str], task_id: str) -> Result[str, str]:
    ...     if task_id not in tasks:
    ...         return Err(f"Task not found: {task_id}")
    ...     return Ok(tasks[task_id])
    ...
    >>> result = find_task({"a1": "Write docs"}, "a1")
    >>> if isinstance(result, Ok):
    ...     print(result.value)
    Write docs
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful outcome carrying ``value``."""

    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failed outcome carrying ``error``."""

    error: E


# Using Union here as TypeVar aliases don't work with | syntax at runtime
Result = Union[Ok[T], Err[E]]  # noqa: UP007


def map_result(result: Ok[T] | Err[E], fn: Callable[[T], U]) -> Ok[U] | Err[E]:
    """Apply ``fn`` to the value inside an Ok, passing an Err through.

    Args:
        result: The result to transform.
        fn: Function to apply to the Ok value.

    Returns:
        Ok with the transformed value, or the original Err.
    """
    if isinstance(result, Ok):
        return Ok(fn(result.value))
    return result
