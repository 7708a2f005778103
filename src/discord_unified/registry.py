"""Action registry: single source of truth for categories, actions and
query resources.

Used by the dispatcher for validation and resolution, and by the help
tool for the reference card. A registry is built once from static specs
and checked for consistency on construction; it is never mutated after.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from discord_unified.operations import SIGNATURES, Operation, OperationSignature

logger = logging.getLogger(__name__)

# Receives normalized parameters, returns the chosen operation and the
# parameters to carry forward (a discriminator key may be removed).
Resolver = Callable[[dict[str, Any]], tuple[Operation, dict[str, Any]]]


@dataclass(frozen=True)
class ActionSpec:
    """Specification for a single action within a category."""

    action: str
    operation: Operation
    description: str = ""
    param_map: Mapping[str, str] = field(default_factory=dict)
    resolver: Resolver | None = None
    candidates: tuple[Operation, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "param_map", MappingProxyType(dict(self.param_map)))

    @property
    def targets(self) -> tuple[Operation, ...]:
        """Every operation this action may resolve to."""
        if self.resolver is not None and self.candidates:
            return self.candidates
        return (self.operation,)


@dataclass(frozen=True)
class CategorySpec:
    """A named group of related actions."""

    name: str
    description: str = ""
    actions: tuple[ActionSpec, ...] = ()
    query_resource: str | None = None


@dataclass(frozen=True)
class QuerySpec:
    """A named read-only resource."""

    resource: str
    operation: Operation
    description: str = ""
    param_map: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "param_map", MappingProxyType(dict(self.param_map)))


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving a request: the operation and its parameters."""

    operation: Operation
    parameters: dict[str, Any]


def apply_param_map(parameters: Mapping[str, Any], param_map: Mapping[str, str]) -> dict[str, Any]:
    """Move every key found in *param_map* to its mapped name.

    Unmapped keys pass through. Insertion order is preserved.
    """
    if not param_map:
        return dict(parameters)
    return {param_map.get(key, key): value for key, value in parameters.items()}


class ActionRegistry:
    """Immutable registry of categories, actions and query resources."""

    def __init__(
        self,
        categories: Iterable[CategorySpec] = (),
        queries: Iterable[QuerySpec] = (),
        *,
        signatures: Mapping[Operation, OperationSignature] = SIGNATURES,
    ) -> None:
        self._signatures = signatures
        self._categories: dict[str, CategorySpec] = {}
        self._actions: dict[str, dict[str, ActionSpec]] = {}
        self._queries: dict[str, QuerySpec] = {}

        # Queries first so category default resources can be checked.
        for query in queries:
            self._add_query(query)
        for category in categories:
            self._add_category(category)

    # -- construction -------------------------------------------------------

    def _signature(self, operation: Operation, where: str) -> OperationSignature:
        signature = self._signatures.get(operation)
        if signature is None:
            raise ValueError(f"{where}: operation {operation.value!r} has no declared signature")
        return signature

    def _check_param_map(
        self,
        operations: tuple[Operation, ...],
        param_map: Mapping[str, str],
        where: str,
    ) -> None:
        signatures = [self._signature(operation, where) for operation in operations]
        if len(signatures) != 1:
            # dynamically resolved; a rename may only apply to some candidates
            return
        signature = signatures[0]
        for target in param_map.values():
            if not signature.accepts(target):
                raise ValueError(
                    f"{where}: renamed key {target!r} is not a parameter "
                    f"of {signature.operation.value!r}"
                )

    def _add_query(self, spec: QuerySpec) -> None:
        if spec.resource in self._queries:
            raise ValueError(f"Duplicate query resource: {spec.resource!r}")
        self._check_param_map((spec.operation,), spec.param_map, f"resource {spec.resource!r}")
        self._queries[spec.resource] = spec

    def _add_category(self, spec: CategorySpec) -> None:
        if spec.name in self._categories:
            raise ValueError(f"Duplicate category: {spec.name!r}")
        if spec.query_resource is not None and spec.query_resource not in self._queries:
            raise ValueError(
                f"Category {spec.name!r} names unknown query resource {spec.query_resource!r}"
            )

        actions: dict[str, ActionSpec] = {}
        for action in spec.actions:
            where = f"{spec.name}.{action.action}"
            if action.action in actions:
                raise ValueError(f"Duplicate action: {where}")
            if action.resolver is not None and not action.candidates:
                raise ValueError(f"{where}: dynamic resolver declares no candidate operations")
            self._check_param_map(action.targets, action.param_map, where)
            actions[action.action] = action

        self._categories[spec.name] = spec
        self._actions[spec.name] = actions

    # -- lookup -------------------------------------------------------------

    def lookup_category(self, category: str) -> CategorySpec | None:
        return self._categories.get(category)

    def lookup_action(self, category: str, action: str) -> ActionSpec | None:
        actions = self._actions.get(category)
        if actions is None:
            return None
        return actions.get(action)

    def lookup_query(self, resource: str) -> QuerySpec | None:
        return self._queries.get(resource)

    def valid_categories(self) -> list[str]:
        """All category names (registration order)."""
        return list(self._categories)

    def valid_actions(self, category: str) -> list[str]:
        """All action names of *category*, empty if the category is unknown."""
        return list(self._actions.get(category, {}))

    def valid_resources(self) -> list[str]:
        """All query resource names (registration order)."""
        return list(self._queries)

    def default_resource(self, category: str) -> str | None:
        """The resource queried when a category name is used as a resource."""
        spec = self._categories.get(category)
        return spec.query_resource if spec else None

    @property
    def signatures(self) -> Mapping[Operation, OperationSignature]:
        """The signature table every registered operation was checked against."""
        return self._signatures

    @property
    def categories(self) -> list[CategorySpec]:
        return list(self._categories.values())

    @property
    def queries(self) -> list[QuerySpec]:
        return list(self._queries.values())

    # -- resolution ---------------------------------------------------------

    def resolve_action(
        self,
        category: str,
        action: str,
        parameters: Mapping[str, Any],
    ) -> Resolution | None:
        """Resolve an already-normalized action request.

        Returns ``None`` when the category or action is unknown, or when a
        dynamic resolver picks an operation outside its declared candidates.
        """
        spec = self.lookup_action(category, action)
        if spec is None:
            return None

        params = dict(parameters)
        if spec.resolver is not None:
            operation, params = spec.resolver(params)
            if operation not in spec.targets:
                logger.error(
                    "Resolver for %s.%s returned undeclared operation %s",
                    category, action, operation.value,
                )
                return None
        else:
            operation = spec.operation

        resolution = Resolution(operation, apply_param_map(params, spec.param_map))
        logger.debug("Resolved %s.%s -> %s", category, action, operation.value)
        return resolution

    def resolve_query(self, resource: str, filters: Mapping[str, Any]) -> Resolution | None:
        """Resolve an already-normalized query. ``None`` if the resource is unknown."""
        spec = self._queries.get(resource)
        if spec is None:
            return None
        return Resolution(spec.operation, apply_param_map(filters, spec.param_map))

    # -- reference card -----------------------------------------------------

    def generate_reference_card(self, category: str | None = None) -> str:
        """Generate human-readable help.

        Without *category*, lists every category and the query resources.
        With one, lists that category's actions and their parameters.
        """
        if category is None:
            return self._overview_card()

        spec = self._categories.get(category)
        if spec is None:
            return (
                f"Unknown category: {category}. "
                f"Valid categories: {', '.join(self._categories)}"
            )

        lines: list[str] = []
        title = spec.name.replace("_", " ").title()
        lines.append(f"### {title}")
        if spec.description:
            lines.append(spec.description)
        lines.append("")
        width = max((len(a.action) for a in spec.actions), default=0)
        for action in spec.actions:
            lines.append(f"  {action.action.ljust(width)}  {action.description}".rstrip())
        if spec.query_resource:
            lines.append("")
            lines.append(f"Query resource: {spec.query_resource}")
        return "\n".join(lines)

    def _overview_card(self) -> str:
        lines: list[str] = []
        if self._categories:
            lines.append("### Categories")
            width = max(len(name) for name in self._categories)
            for spec in self._categories.values():
                lines.append(f"  {spec.name.ljust(width)}  {spec.description}".rstrip())
            lines.append("")
        if self._queries:
            lines.append("### Query resources")
            lines.append(f"  {', '.join(self._queries)}")
            lines.append("")
        if self._categories:
            lines.append("Pass a category name for its actions and parameters.")
        return "\n".join(lines).rstrip("\n")
