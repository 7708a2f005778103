"""Unified dispatcher: execute, query and batch entry points.

Turns generic ``(category, action, parameters)`` and ``(resource, filters)``
requests into backend calls. Every entry point returns a result value;
caller mistakes and backend failures never escape as exceptions.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from discord_unified.backend import Backend, bind_backend
from discord_unified.errors import (
    DispatchError,
    InvalidAction,
    InvalidCategory,
    InvalidResource,
    ResolutionFailure,
    UnderlyingOperationFailure,
)
from discord_unified.formatter import suggest
from discord_unified.mappings import build_default_registry
from discord_unified.normalizer import normalize
from discord_unified.operations import BoundCall, bind_call
from discord_unified.registry import ActionRegistry

logger = logging.getLogger(__name__)


@dataclass
class ExecutionResult:
    """Outcome of one execute or query call. ``data`` and ``error`` are exclusive."""

    success: bool
    data: Any = None
    error: str | None = None

    @classmethod
    def ok(cls, data: Any) -> ExecutionResult:
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> ExecutionResult:
        return cls(success=False, error=error)

    def to_dict(self) -> dict[str, Any]:
        if self.success:
            return {"success": True, "data": self.data}
        return {"success": False, "error": self.error}


@dataclass
class BatchResult:
    """Aggregated outcome of a batch. Unattempted requests have no entry."""

    results: list[ExecutionResult] = field(default_factory=list)
    completed_count: int = 0
    failed_count: int = 0

    @property
    def success(self) -> bool:
        return self.failed_count == 0

    def record(self, result: ExecutionResult) -> None:
        self.results.append(result)
        if result.success:
            self.completed_count += 1
        else:
            self.failed_count += 1

    def skipped_count(self, total: int) -> int:
        """Number of requests out of *total* that were never attempted."""
        return max(total - len(self.results), 0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "results": [r.to_dict() for r in self.results],
            "completedCount": self.completed_count,
            "failedCount": self.failed_count,
        }


@dataclass(frozen=True)
class DispatchRequest:
    """One execute request."""

    category: str
    action: str
    parameters: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, payload: Any) -> DispatchRequest:
        """Parse a request mapping.

        Accepts ``category`` or ``operation`` for the category and
        ``parameters`` or ``params`` for the parameters. Raises
        :class:`ValueError` on a malformed payload.
        """
        if isinstance(payload, DispatchRequest):
            return payload
        if not isinstance(payload, Mapping):
            raise ValueError(f"expected an object, got {type(payload).__name__}")

        category = payload.get("category", payload.get("operation"))
        action = payload.get("action")
        parameters = payload.get("parameters", payload.get("params"))

        if not isinstance(category, str) or not category:
            raise ValueError("missing 'category'")
        if not isinstance(action, str) or not action:
            raise ValueError("missing 'action'")
        if parameters is None:
            parameters = {}
        if not isinstance(parameters, Mapping):
            raise ValueError("'parameters' must be an object")
        return cls(category, action, dict(parameters))

    @property
    def label(self) -> str:
        return f"{self.category}.{self.action}"


@dataclass(frozen=True)
class QueryRequest:
    """One query request."""

    resource: str
    filters: dict[str, Any] = field(default_factory=dict)
    limit: int | None = None

    def merged_filters(self) -> dict[str, Any]:
        """Filters with ``limit`` folded in, before normalization."""
        merged = dict(self.filters)
        if self.limit is not None:
            merged["limit"] = self.limit
        return merged


@dataclass(frozen=True)
class BatchRequest:
    """An ordered list of execute requests run one after another."""

    requests: tuple[Any, ...]
    stop_on_error: bool = True


def _describe(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


class UnifiedDispatcher:
    """Dispatches generic requests to backend operations.

    Parameters
    ----------
    backend
        Object or mapping implementing the operations, see
        :func:`~discord_unified.backend.bind_backend`.
    registry : ActionRegistry | None
        Category and resource tables. Defaults to the built-in registry.
    """

    def __init__(
        self,
        backend: Backend | Any,
        registry: ActionRegistry | None = None,
    ) -> None:
        self._backend = bind_backend(backend)
        self._registry = registry if registry is not None else build_default_registry()

    @property
    def registry(self) -> ActionRegistry:
        return self._registry

    # -- preparation --------------------------------------------------------

    def prepare_action(
        self,
        category: str,
        action: str,
        parameters: Mapping[str, Any] | None = None,
    ) -> BoundCall:
        """Validate, normalize, resolve and position an execute request.

        Raises a :class:`DispatchError` subclass; never touches the backend.
        """
        registry = self._registry
        if not isinstance(category, str) or registry.lookup_category(category) is None:
            valid = registry.valid_categories()
            hint = suggest(category, valid) if isinstance(category, str) else None
            raise InvalidCategory(str(category), valid, hint)

        if not isinstance(action, str) or registry.lookup_action(category, action) is None:
            valid = registry.valid_actions(category)
            hint = suggest(action, valid) if isinstance(action, str) else None
            raise InvalidAction(str(action), category, valid, hint)

        if parameters is not None and not isinstance(parameters, Mapping):
            raise DispatchError(
                f"Parameters for {category}.{action} must be an object, "
                f"got {type(parameters).__name__}"
            )

        try:
            resolution = registry.resolve_action(category, action, normalize(parameters))
        except Exception as exc:
            raise ResolutionFailure(
                f"Failed to resolve action: {category}.{action}: {_describe(exc)}"
            ) from exc
        if resolution is None:
            raise ResolutionFailure(f"Failed to resolve action: {category}.{action}")
        return bind_call(resolution.operation, resolution.parameters, self._registry.signatures)

    def prepare_query(
        self,
        resource: str,
        filters: Mapping[str, Any] | None = None,
        limit: int | None = None,
    ) -> BoundCall:
        """Validate, normalize, resolve and position a query request."""
        registry = self._registry
        name = resource
        if not isinstance(name, str) or registry.lookup_query(name) is None:
            fallback = registry.default_resource(name) if isinstance(name, str) else None
            if fallback is None:
                valid = registry.valid_resources()
                hint = suggest(name, valid) if isinstance(name, str) else None
                raise InvalidResource(str(name), valid, hint)
            logger.debug("Querying category %r through resource %r", name, fallback)
            name = fallback

        if filters is not None and not isinstance(filters, Mapping):
            raise DispatchError(
                f"Filters for {name} must be an object, got {type(filters).__name__}"
            )

        request = QueryRequest(name, dict(filters or {}), limit)
        try:
            resolution = registry.resolve_query(request.resource, normalize(request.merged_filters()))
        except Exception as exc:
            raise ResolutionFailure(
                f"Failed to resolve query for resource: {name}: {_describe(exc)}"
            ) from exc
        if resolution is None:
            raise ResolutionFailure(f"Failed to resolve query for resource: {name}")
        return bind_call(resolution.operation, resolution.parameters, self._registry.signatures)

    # -- invocation ---------------------------------------------------------

    async def invoke(self, call: BoundCall) -> Any:
        """Call the backend for *call*, awaiting the result if needed."""
        func = self._backend.get(call.operation)
        if func is None:
            raise UnderlyingOperationFailure(
                f"Operation {call.operation.value!r} is not available on the backend"
            )
        result = func(*call.args)
        if inspect.isawaitable(result):
            result = await result
        return result

    async def _run(self, call: BoundCall, label: str) -> ExecutionResult:
        logger.debug("Dispatching %s as %s", label, call)
        try:
            data = await self.invoke(call)
        except Exception as exc:
            logger.warning("%s failed: %s", label, _describe(exc))
            logger.debug("%s traceback", label, exc_info=True)
            return ExecutionResult.fail(_describe(exc))
        return ExecutionResult.ok(data)

    @staticmethod
    def _rejected(exc: DispatchError) -> ExecutionResult:
        if isinstance(exc, ResolutionFailure):
            logger.error("Registry inconsistency: %s", exc)
        else:
            logger.debug("Rejected request: %s", exc)
        return ExecutionResult.fail(str(exc))

    # -- entry points -------------------------------------------------------

    async def execute(
        self,
        category: str,
        action: str,
        parameters: Mapping[str, Any] | None = None,
    ) -> ExecutionResult:
        """Execute one action against the backend."""
        try:
            call = self.prepare_action(category, action, parameters)
        except DispatchError as exc:
            return self._rejected(exc)
        return await self._run(call, f"{category}.{action}")

    async def query(
        self,
        resource: str,
        filters: Mapping[str, Any] | None = None,
        limit: int | None = None,
    ) -> ExecutionResult:
        """Read a resource. *limit* is passed on as the canonical count."""
        try:
            call = self.prepare_query(resource, filters, limit)
        except DispatchError as exc:
            return self._rejected(exc)
        return await self._run(call, f"query {resource}")

    async def batch(
        self,
        requests: Iterable[Any],
        stop_on_error: bool = True,
    ) -> BatchResult:
        """Execute *requests* in order, one at a time.

        With *stop_on_error* the batch halts after the first failure and the
        remaining requests are not attempted. Completed requests are not
        undone.
        """
        return await self.run_batch(BatchRequest(tuple(requests or ()), stop_on_error))

    async def run_batch(self, request: BatchRequest) -> BatchResult:
        result = BatchResult()
        for index, item in enumerate(request.requests):
            try:
                parsed = DispatchRequest.from_dict(item)
            except ValueError as exc:
                outcome = ExecutionResult.fail(f"Invalid batch request at index {index}: {exc}")
            else:
                outcome = await self.execute(parsed.category, parsed.action, parsed.parameters)

            result.record(outcome)
            if not outcome.success and request.stop_on_error:
                break

        logger.info(
            "Batch finished: %d completed, %d failed, %d skipped",
            result.completed_count,
            result.failed_count,
            result.skipped_count(len(request.requests)),
        )
        return result

    def help(self) -> dict[str, Any]:
        """Valid actions per category and the valid query resources."""
        registry = self._registry
        return {
            "categories": {
                name: registry.valid_actions(name) for name in registry.valid_categories()
            },
            "resources": registry.valid_resources(),
        }

    def describe(self, category: str | None = None) -> str:
        """Human-readable reference card, optionally for one category."""
        return self._registry.generate_reference_card(category)
