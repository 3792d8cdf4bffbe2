"""
Cache Interception Layer

Wraps arbitrary operations (coroutine functions or plain callables) with
read-through caching or post-mutation invalidation.

Read-through:
    1. No options, or skip_cache        -> call directly
    2. Cache unavailable                -> call directly (fail open)
    3. condition(args, kwargs) is false -> call directly
    4. Derive key, GET
    5. Hit                              -> return cached value, operation not invoked
    6. Miss                             -> invoke; non-None result is written in
                                           the background, result returned

Invalidation:
    Invoke; when the operation returns a non-None result every pattern is
    deleted concurrently with an all-settled join. A failing pattern is logged
    and never affects the returned result. Errors raised by the operation
    propagate and nothing is invalidated.

Values come back from the cache as decoded JSON, so a cached operation that
returns model objects yields plain dicts/lists on a hit.

Concurrent misses for the same key may each invoke the operation; the last
write wins.

Usage:
    interceptor = CacheInterceptor(cache_client)

    class ProductService:
        @interceptor.cached(ttl=CACHE_TTL.PRODUCT_DETAILS)
        async def get_product(self, product_id: str): ...

        @interceptor.invalidates(CACHE_PATTERNS.PRODUCTS)
        async def update_product(self, product_id: str, data: dict): ...

Author: Platform Engineering
Date: 2026-10-18
"""

import asyncio
import dataclasses
import functools
import inspect
from collections.abc import Awaitable, Callable, Coroutine, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any

from fastapi import Request
from pydantic import BaseModel

from commerce_cache.core.config.constants import Stage
from commerce_cache.core.exceptions import (
    CacheLayerError,
    ConfigurationError,
    OperationNotRegisteredError,
)
from commerce_cache.core.logging.logger import get_logger, log_stage
from commerce_cache.infrastructure.cache.cache_client import CacheClient
from commerce_cache.infrastructure.cache.key_generator import CacheKeyGenerator

logger = get_logger(__name__)

KeyFunc = Callable[[tuple, dict], str]
ConditionFunc = Callable[[tuple, dict], bool]

_RECEIVER_NAMES = ("self", "cls")
_SCALAR_TYPES = (str, int, float, bool, Enum, date)
_SEQUENCE_TYPES = (list, tuple, set, frozenset)


@dataclass(frozen=True)
class CacheOptions:
    """
    Read-through configuration for one operation.

    Attributes:
        ttl: Entry lifetime in seconds (None = client default)
        key_generator: Custom key builder receiving (args, kwargs)
        condition: Predicate receiving (args, kwargs); false bypasses the cache
        version: Key schema version override
        skip_cache: Bypass the cache entirely
        prefix: Override of the default "{owner}:{method}" key prefix
    """

    ttl: int | None = None
    key_generator: KeyFunc | None = None
    condition: ConditionFunc | None = None
    version: str | None = None
    skip_cache: bool = False
    prefix: str | None = None


@dataclass(frozen=True)
class InvalidationSpec:
    """
    Patterns to delete after a successful mutation.

    By default the deletions finish before the mutation result is returned.
    With wait=False they run as a tracked background task that
    CacheInterceptor.drain() awaits.
    """

    patterns: tuple[str, ...] = field(default_factory=tuple)
    wait: bool = True

    def __post_init__(self):
        patterns = (self.patterns,) if isinstance(self.patterns, str) else tuple(self.patterns)
        object.__setattr__(self, "patterns", patterns)


async def _invoke(fn: Callable[..., Any], args: tuple, kwargs: dict) -> Any:
    result = fn(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


def _has_receiver(fn: Callable[..., Any]) -> bool:
    """True when the first declared parameter is self/cls (unbound method)."""
    try:
        parameters = list(inspect.signature(fn).parameters)
    except (TypeError, ValueError):
        return False
    return bool(parameters) and parameters[0] in _RECEIVER_NAMES


def default_key_prefix(fn: Callable[..., Any]) -> str:
    """
    "{owner_lower}:{method_name}" derived from the function's qualified name.

    Module-level functions use the last segment of their module as owner.
    """
    target = getattr(fn, "__func__", fn)
    qualname = getattr(target, "__qualname__", None) or type(target).__name__
    parts = [part for part in qualname.split(".") if part != "<locals>"]
    method = parts[-1]
    if len(parts) > 1:
        owner = parts[-2]
    else:
        owner = (getattr(target, "__module__", None) or "operation").rsplit(".", 1)[-1]
    return f"{owner.lower()}:{method}"


def extract_params(fn: Callable[..., Any], args: tuple, kwargs: dict) -> dict[str, Any]:
    """
    Key parameters from call arguments.

    An HTTP request among the arguments contributes its route and query
    parameters first. Scalars and sequences become arg{i}; mappings,
    dataclasses and pydantic models are spread by field; keyword arguments are
    kept by name. self/cls and values with no stable rendering are skipped.
    """
    positional = args[1:] if args and _has_receiver(fn) else args
    params: dict[str, Any] = {}

    for value in (*positional, *kwargs.values()):
        if isinstance(value, Request):
            params.update(value.path_params)
            params.update(value.query_params)

    for index, arg in enumerate(positional):
        if arg is None or isinstance(arg, Request):
            continue
        if isinstance(arg, Mapping):
            params.update(arg)
        elif isinstance(arg, BaseModel):
            params.update(arg.model_dump())
        elif dataclasses.is_dataclass(arg) and not isinstance(arg, type):
            params.update(dataclasses.asdict(arg))
        elif isinstance(arg, _SCALAR_TYPES + _SEQUENCE_TYPES):
            params[f"arg{index}"] = arg

    params.update({name: value for name, value in kwargs.items() if not isinstance(value, Request)})
    return params


class CacheInterceptor:
    """
    Applies read-through caching and invalidation around operations.

    Background cache writes and invalidations are held in a task set so they
    are never garbage-collected mid-flight and can be awaited with drain().
    """

    def __init__(self, cache: CacheClient, key_generator: CacheKeyGenerator | None = None):
        self._cache = cache
        self._keys = key_generator or CacheKeyGenerator()
        self._pending: set[asyncio.Task] = set()

    @property
    def cache(self) -> CacheClient:
        return self._cache

    @property
    def key_generator(self) -> CacheKeyGenerator:
        return self._keys

    @property
    def pending_tasks(self) -> int:
        return len(self._pending)

    # -------------------------------------------------------------------------
    # Background task tracking
    # -------------------------------------------------------------------------

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> None:
        """Wait for every background write and invalidation to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    # -------------------------------------------------------------------------
    # Read-through
    # -------------------------------------------------------------------------

    def build_key(self, options: CacheOptions, fn: Callable[..., Any], args: tuple, kwargs: dict) -> str:
        if options.key_generator is not None:
            return options.key_generator(args, kwargs)
        prefix = options.prefix or default_key_prefix(fn)
        return self._keys.generate_key(prefix, extract_params(fn, args, kwargs), options.version)

    async def _store(self, key: str, value: Any, ttl: int | None) -> None:
        try:
            await self._cache.set(key, value, ttl)
        except CacheLayerError as e:
            log_stage(
                logger,
                Stage.READ_THROUGH,
                "Failed to cache result",
                level="warning",
                cache_key=key,
                error=e.message,
            )

    async def read_through(
        self,
        options: CacheOptions | None,
        fn: Callable[..., Any],
        args: tuple = (),
        kwargs: dict | None = None,
    ) -> Any:
        """
        Serve fn(*args, **kwargs) from the cache when possible.

        STAGE-I.1: Read-through

        Errors raised by fn propagate unchanged; cache-side errors degrade to
        a direct call.
        """
        kwargs = kwargs or {}

        if options is None or options.skip_cache:
            return await _invoke(fn, args, kwargs)

        if not await self._cache.is_available():
            log_stage(
                logger,
                Stage.READ_THROUGH,
                "Cache is not available, falling back to direct execution",
                level="warning",
                operation=default_key_prefix(fn),
            )
            return await _invoke(fn, args, kwargs)

        try:
            applies = options.condition is None or options.condition(args, kwargs)
            if applies:
                key = self.build_key(options, fn, args, kwargs)
                cached = await self._cache.get(key)
        except Exception as e:
            log_stage(
                logger,
                Stage.READ_THROUGH,
                "Cache lookup failed, executing directly",
                level="error",
                operation=default_key_prefix(fn),
                error=str(e),
                error_type=type(e).__name__,
            )
            return await _invoke(fn, args, kwargs)

        if not applies:
            return await _invoke(fn, args, kwargs)

        if cached is not None:
            log_stage(logger, Stage.READ_THROUGH, "Cache hit", level="debug", cache_key=key)
            return cached

        log_stage(logger, Stage.READ_THROUGH, "Cache miss", level="debug", cache_key=key)
        result = await _invoke(fn, args, kwargs)
        if result is not None:
            self._spawn(self._store(key, result, options.ttl))
        return result

    def with_cache(self, options: CacheOptions | None, fn: Callable[..., Any]) -> Callable[..., Awaitable[Any]]:
        """Return an async wrapper applying read_through to every call of fn."""

        @functools.wraps(fn)
        async def wrapper(*args, **kwargs):
            return await self.read_through(options, fn, args, kwargs)

        return wrapper

    def cached(self, options: CacheOptions | None = None, **option_fields: Any):
        """
        Decorator form of with_cache.

        Example:
            @interceptor.cached(ttl=600, prefix=CACHE_KEYS.PRODUCT_DETAILS)
            async def get_product(self, product_id): ...
        """
        resolved = options or CacheOptions(**option_fields)

        def decorator(fn: Callable[..., Any]) -> Callable[..., Awaitable[Any]]:
            return self.with_cache(resolved, fn)

        return decorator

    # -------------------------------------------------------------------------
    # Invalidation
    # -------------------------------------------------------------------------

    async def invalidate_patterns(self, patterns: Iterable[str]) -> int:
        """
        Delete all patterns concurrently; each failure is logged on its own.

        STAGE-I.2: Invalidation

        Returns:
            Total number of keys deleted by the patterns that succeeded
        """
        patterns = list(patterns)
        results = await asyncio.gather(
            *(self._cache.del_pattern(pattern) for pattern in patterns),
            return_exceptions=True,
        )

        deleted = 0
        for pattern, result in zip(patterns, results):
            if isinstance(result, BaseException):
                log_stage(
                    logger,
                    Stage.INVALIDATION,
                    "Cache invalidation failed",
                    level="error",
                    pattern=pattern,
                    error=str(result),
                )
            else:
                deleted += result
                log_stage(
                    logger,
                    Stage.INVALIDATION,
                    "Invalidated cache pattern",
                    level="debug",
                    pattern=pattern,
                    deleted=result,
                )
        return deleted

    async def invalidate(
        self,
        invalidation: InvalidationSpec | None,
        fn: Callable[..., Any],
        args: tuple = (),
        kwargs: dict | None = None,
    ) -> Any:
        """Run a mutating operation, then delete its invalidation patterns on success."""
        result = await _invoke(fn, args, kwargs or {})

        if invalidation is None or not invalidation.patterns or result is None:
            return result

        if invalidation.wait:
            await self.invalidate_patterns(invalidation.patterns)
        else:
            self._spawn(self.invalidate_patterns(invalidation.patterns))
        return result

    def with_invalidation(
        self, invalidation: InvalidationSpec | None, fn: Callable[..., Any]
    ) -> Callable[..., Awaitable[Any]]:
        """Return an async wrapper applying invalidate to every call of fn."""

        @functools.wraps(fn)
        async def wrapper(*args, **kwargs):
            return await self.invalidate(invalidation, fn, args, kwargs)

        return wrapper

    def invalidates(self, *patterns: str, wait: bool = True):
        """
        Decorator form of with_invalidation.

        Example:
            @interceptor.invalidates(CACHE_PATTERNS.PRODUCTS, CACHE_PATTERNS.DASHBOARD)
            async def update_product(self, product_id, data): ...
        """
        invalidation = InvalidationSpec(patterns=patterns, wait=wait)

        def decorator(fn: Callable[..., Any]) -> Callable[..., Awaitable[Any]]:
            return self.with_invalidation(invalidation, fn)

        return decorator


class OperationRegistry:
    """
    Explicit registration table of named operations and their cache behaviour.

    Each registration is composed once; call() dispatches by name.

    Usage:
        registry = OperationRegistry(interceptor)
        registry.register(
            "products.get",
            catalog.get_product,
            cache=CacheOptions(ttl=CACHE_TTL.PRODUCT_DETAILS, prefix=CACHE_KEYS.PRODUCT_DETAILS),
        )
        registry.register(
            "products.update",
            catalog.update_product,
            invalidation=InvalidationSpec((CACHE_PATTERNS.PRODUCTS,)),
        )
        product = await registry.call("products.get", "p-1")
    """

    def __init__(self, interceptor: CacheInterceptor):
        self._interceptor = interceptor
        self._operations: dict[str, Callable[..., Awaitable[Any]]] = {}

    def register(
        self,
        name: str,
        fn: Callable[..., Any],
        cache: CacheOptions | None = None,
        invalidation: InvalidationSpec | None = None,
    ) -> Callable[..., Awaitable[Any]]:
        """
        Register an operation.

        Raises:
            ConfigurationError: If the name is already registered
        """
        if name in self._operations:
            raise ConfigurationError(
                f"Operation '{name}' is already registered", details={"operation": name}
            )

        composed: Callable[..., Any] = fn
        if invalidation is not None:
            composed = self._interceptor.with_invalidation(invalidation, composed)
        if cache is not None:
            composed = self._interceptor.with_cache(cache, composed)
        if composed is fn:
            composed = self._interceptor.with_cache(None, fn)

        self._operations[name] = composed
        logger.debug(
            "Operation registered",
            operation=name,
            cached=cache is not None,
            invalidates=list(invalidation.patterns) if invalidation else [],
        )
        return composed

    async def call(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """
        Dispatch a registered operation.

        Raises:
            OperationNotRegisteredError: If no operation has that name
        """
        operation = self._operations.get(name)
        if operation is None:
            raise OperationNotRegisteredError(
                f"Operation '{name}' is not registered",
                details={"operation": name, "registered": sorted(self._operations)},
            )
        return await operation(*args, **kwargs)

    @property
    def names(self) -> list[str]:
        return sorted(self._operations)

    def __contains__(self, name: object) -> bool:
        return name in self._operations
