from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Literal, TypeVar

T = TypeVar("T")

ResultStatus = Literal["ok", "unavailable", "not_found", "invalid"]


@dataclass(frozen=True)
class QueryResult(Generic[T]):
    """
    Outcome of a query/mutation against the listing store.

    Keeps "no matches" (ok + empty data) apart from "store unavailable",
    which the HTTP layer maps to different status codes.
    """
    status: ResultStatus
    data: T | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"


def ok(data: Any) -> QueryResult:
    return QueryResult(status="ok", data=data)


def unavailable(error: str) -> QueryResult:
    return QueryResult(status="unavailable", error=error)


def not_found(error: str = "Property not found") -> QueryResult:
    return QueryResult(status="not_found", error=error)


def invalid(error: str) -> QueryResult:
    return QueryResult(status="invalid", error=error)
