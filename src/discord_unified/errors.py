"""Error taxonomy for the dispatch layer.

Every error raised while turning a request into a backend call derives from
:class:`DispatchError`. The dispatcher catches them at its boundary and turns
them into failed :class:`~discord_unified.dispatcher.ExecutionResult` values.
"""

from __future__ import annotations


class DispatchError(Exception):
    """Base class for dispatch failures."""


class _InvalidName(DispatchError):
    kind = "name"

    def __init__(self, name: str, valid: list[str], suggestion: str | None = None) -> None:
        self.name = name
        self.valid = list(valid)
        self.suggestion = suggestion
        super().__init__(self._render())

    def _render(self) -> str:
        hint = f" Did you mean {self.suggestion!r}?" if self.suggestion else ""
        return (
            f"Invalid {self.kind}: {self.name!r}.{hint} "
            f"Valid {self.kind_plural}: {', '.join(self.valid)}"
        )

    @property
    def kind_plural(self) -> str:
        if self.kind.endswith("y"):
            return self.kind[:-1] + "ies"
        return self.kind + "s"


class InvalidCategory(_InvalidName):
    """Unknown operation category."""

    kind = "category"


class InvalidResource(_InvalidName):
    """Unknown query resource."""

    kind = "resource"


class InvalidAction(_InvalidName):
    """Unknown action within a known category."""

    kind = "action"

    def __init__(
        self,
        name: str,
        category: str,
        valid: list[str],
        suggestion: str | None = None,
    ) -> None:
        self.category = category
        super().__init__(name, valid, suggestion)

    def _render(self) -> str:
        hint = f" Did you mean {self.suggestion!r}?" if self.suggestion else ""
        return (
            f"Invalid action {self.name!r} for category {self.category!r}.{hint} "
            f"Valid actions: {', '.join(self.valid)}"
        )


class ResolutionFailure(DispatchError):
    """The registry could not resolve a request it had already validated."""


class UnderlyingOperationFailure(DispatchError):
    """The backend raised, or does not provide, the resolved operation."""
