"""Validation checks.

Each check is a plain function ``(ModelIndex, RuleConfig) -> list[Issue]``
decorated with @check, which records the tables it cannot run without and
the kind of issue reported if it crashes. The engine owns the ordered list
of checks that make up a validation run.

To add a new check:
1. Define the function in the module of the table it is about
2. Decorate it with @check(requires=(...), on_error=IssueKind.X)
3. Add it to CHECKS in feed_validator.engine
"""

import functools
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Protocol

from feed_validator.issues import Issue, IssueKind

if TYPE_CHECKING:
    from feed_validator.index import ModelIndex
    from feed_validator.rules import RuleConfig


class Check(Protocol):
    """A registered check function."""

    __name__: str
    requires: tuple[str, ...]
    on_error: IssueKind

    def __call__(
        self, index: "ModelIndex", rules: "RuleConfig"
    ) -> list[Issue]: ...


def check(
    *,
    requires: tuple[str, ...] = (),
    on_error: IssueKind,
) -> Callable[[Callable[..., Iterable[Issue]]], Check]:
    """Decorator registering a function as a validation check.

    Args:
        requires: Tables the check needs; it is skipped when one of them
            failed to decode
        on_error: Issue kind reported when the check raises

    Example:
        >>> @check(requires=("routes",), on_error=IssueKind.INVALID_ROUTE_TYPE)
        ... def check_route_types(index, rules):
        ...     return [...]

    Returns:
        Decorated function always returning a list of issues
    """

    def decorator(func: Callable[..., Iterable[Issue]]) -> Check:
        @functools.wraps(func)
        def wrapper(index: "ModelIndex", rules: "RuleConfig") -> list[Issue]:
            return list(func(index, rules))

        wrapper.requires = requires
        wrapper.on_error = on_error
        return wrapper

    return decorator


__all__ = ["Check", "check"]
