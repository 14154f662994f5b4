from typing import Iterable, TypeVar

T = TypeVar("T")


def maybe(value: T | None) -> list[T]:
    return [] if value is None else [value]


def head_or_none(values: Iterable[T]) -> T | None:
    return next(iter(values), None)


def head(values: Iterable[T]) -> T:
    return next(iter(values))


def must(value: T | None, message: str = "Unexpected None") -> T:
    assert value is not None, message
    return value
