"""
HTTP exposure model — routes, the request/response codec and the
application that collects them.

A route pairs an HTTPRouteTrigger (method, path, headers to read) with a
RequestResponseCodec: the request model builds an Op from the payload plus
a RouteContext, the response model renders the op's Result.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal, Protocol, Self, TypeVar

from kungfu import Result

from orderflow.ops import Op, Runner

T_co = TypeVar("T_co", covariant=True)
E_co = TypeVar("E_co", covariant=True)
DomainT_co = TypeVar("DomainT_co", covariant=True)
DomainT_contra = TypeVar("DomainT_contra", contravariant=True)

type Method = Literal["GET", "POST", "PUT", "DELETE", "PATCH"]


# ═══════════════════════════════════════════════════════════════════════════════
# Trigger
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class HTTPRouteTrigger:
    """
    An HTTP route. `headers` are read off the request and handed to the
    codec; `path_types` types `{name}` path segments (str when absent).
    """

    method: Method
    path: str
    headers: frozenset[str] = field(default_factory=lambda: frozenset())
    path_types: Mapping[str, type] = field(default_factory=lambda: {})
    summary: str | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Codec
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class RouteContext:
    """Transport values outside the payload: path params and trigger headers."""

    path: Mapping[str, Any] = field(default_factory=lambda: {})
    headers: Mapping[str, str | None] = field(default_factory=lambda: {})

    def header(self, name: str) -> str | None:
        value = self.headers.get(name)
        return value.strip() if value is not None and value.strip() else None


class ToDomain(Protocol[DomainT_co]):
    def to_domain(self, ctx: RouteContext) -> DomainT_co: ...


class FromDomain(Protocol[DomainT_contra]):
    @classmethod
    def from_domain(cls, dom: DomainT_contra) -> FromDomain[DomainT_contra]: ...


@dataclass(frozen=True, slots=True)
class RequestResponseCodec:
    request: type[ToDomain[Any]]
    response: type[FromDomain[Result[Any, Any]]]

    if TYPE_CHECKING:

        def __init__(
            self,
            request: type[ToDomain[Op[T_co, E_co]]],
            response: type[FromDomain[Result[T_co, E_co]]],
        ) -> None: ...


type Route = tuple[HTTPRouteTrigger, RequestResponseCodec]


# ═══════════════════════════════════════════════════════════════════════════════
# Endpoint / Application
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Endpoint:
    """Routes served by one runner."""

    runner: Runner
    routes: tuple[Route, ...] = ()

    def expose(self, trigger: HTTPRouteTrigger, codec: RequestResponseCodec) -> Endpoint:
        return Endpoint(runner=self.runner, routes=(*self.routes, (trigger, codec)))


def endpoint(runner: Runner) -> Endpoint:
    return Endpoint(runner=runner)


class Application:
    """Ordered set of endpoints; routes are registered in mount order."""

    def __init__(self) -> None:
        self.endpoints: list[Endpoint] = []

    def mount(self, *endps: Endpoint) -> Self:
        self.endpoints.extend(endps)
        return self


def application() -> Application:
    return Application()


__all__ = (
    "Method",
    "HTTPRouteTrigger",
    "RouteContext",
    "ToDomain",
    "FromDomain",
    "RequestResponseCodec",
    "Route",
    "Endpoint",
    "endpoint",
    "Application",
    "application",
)
