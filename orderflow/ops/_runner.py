"""
Ops — data-driven dispatch with dependency injection by type.

Core idea:
- Op[T, E] is base class for operations
- A handler is registered per Op type
- Handler params are resolved from annotations: the Op type gets the
  request, any other type is looked up among injected dependencies

Example:
    @dataclass(frozen=True, slots=True)
    class GetOrder(Op[OrderView, OrderError]):
        order_id: int
        actor: Actor

    async def get_order(
        req: GetOrder,
        session_factory: async_sessionmaker[AsyncSession],   # injected
    ) -> Result[OrderView, OrderError]:
        ...

    runner = ops().on(GetOrder, get_order).compile().inject(async_sessionmaker, factory)
    result = await runner.run(GetOrder(7, actor))
"""

from __future__ import annotations

import inspect
from abc import ABC
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeAliasType, TypeVar, cast, get_origin, get_type_hints

from kungfu import Error, LazyCoroResult, Ok, Result

T = TypeVar("T")
E = TypeVar("E")
T_co = TypeVar("T_co", covariant=True)
E_co = TypeVar("E_co", covariant=True)

HandlerFunc = Callable[..., Awaitable[Result[Any, Any]]]


class Op(ABC, Generic[T_co, E_co]):
    """Base class for operations. T is the success value, E the error."""


class UnresolvedDependency(LookupError):
    """Handler asks for a type nothing was injected for."""


def _key(typ: object) -> object:
    """async_sessionmaker[AsyncSession] and async_sessionmaker share a key."""
    if isinstance(typ, TypeAliasType):
        typ = typ.__value__
    return get_origin(typ) or typ


# ═══════════════════════════════════════════════════════════════════════════════
# Registration
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class _OpReg:
    """Registration: Op type → handler + resolved parameter plan."""

    op_type: type[Op[Any, Any]]
    handler: HandlerFunc
    # (param name, None for the request itself or the dependency key)
    params: tuple[tuple[str, object | None], ...]


def _plan(op_type: type[Op[Any, Any]], handler: HandlerFunc) -> _OpReg:
    sig = inspect.signature(handler)
    hints = get_type_hints(handler)
    params: list[tuple[str, object | None]] = []

    for pname, p in sig.parameters.items():
        ptype = hints.get(pname, p.annotation)
        if ptype is op_type:
            params.append((pname, None))
        else:
            params.append((pname, _key(ptype)))

    return _OpReg(op_type=op_type, handler=handler, params=tuple(params))


@dataclass(slots=True, frozen=True)
class OpsBuilder:
    """Builder for operation handlers."""

    _items: tuple[tuple[type[Op[Any, Any]], HandlerFunc], ...] = ()

    def on(
        self,
        op_type: type[Op[Any, Any]],
        handler: HandlerFunc,
    ) -> OpsBuilder:
        """Register handler for operation type."""
        # Last registration wins
        others = tuple(i for i in self._items if i[0] is not op_type)
        return OpsBuilder(_items=(*others, (op_type, handler)))

    def compile(self) -> Runner:
        """Resolve every handler signature once, up front."""
        return Runner(_registry={op_type: _plan(op_type, h) for op_type, h in self._items})


# ═══════════════════════════════════════════════════════════════════════════════
# Runner
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True)
class Runner:
    """Executes operations against their registered handlers."""

    _registry: dict[type[Op[Any, Any]], _OpReg]
    _scope: dict[object, object] = field(default_factory=dict[object, object])

    def inject(self, typ: object, impl: object) -> Runner:
        """Inject shared dependency."""
        self._scope[_key(typ)] = impl
        return self

    def handles(self, op_type: type[Op[Any, Any]]) -> bool:
        return op_type in self._registry

    def _arguments(self, reg: _OpReg, req: Op[Any, Any]) -> dict[str, object]:
        kwargs: dict[str, object] = {}
        for pname, key in reg.params:
            if key is None:
                kwargs[pname] = req
            elif key in self._scope:
                kwargs[pname] = self._scope[key]
            else:
                raise UnresolvedDependency(
                    f"{reg.op_type.__name__}: nothing injected for {pname!r} ({key!r})"
                )
        return kwargs

    async def run(self, req: Op[T, E]) -> Result[T, E]:
        op_type = type(req)
        reg = self._registry.get(op_type)
        if not reg:
            return cast(Result[T, E], Error(f"Op not registered: {op_type.__name__}"))

        result = await reg.handler(**self._arguments(reg, req))
        if isinstance(result, (Ok, Error)):
            return cast(Result[T, E], result)
        # Wrap in Ok if not Result
        return cast(Result[T, E], Ok(result))

    def __call__(self, req: Op[T, E]) -> LazyCoroResult[T, E]:
        """Execute operation (returns awaitable)."""

        async def inner() -> Result[T, E]:
            return await self.run(req)

        return LazyCoroResult(inner)


def ops() -> OpsBuilder:
    """Create ops builder: ops().on(...).compile()"""
    return OpsBuilder()


# Aliases
Returns = Op
Returning = Op

__all__ = (
    "Op",
    "Returns",
    "Returning",
    "OpsBuilder",
    "Runner",
    "UnresolvedDependency",
    "ops",
)
