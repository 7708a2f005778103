"""Binding between :class:`Operation` members and backend callables.

The backend is whatever object talks to Discord. It exposes one method per
operation, named after the operation's value (``send_message``,
``create_voice_channel``, ...), taking the positional arguments listed in
:data:`~discord_unified.operations.SIGNATURES`. Methods may be plain or
``async``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

from discord_unified.operations import Operation

logger = logging.getLogger(__name__)

Backend = Mapping[Operation, Callable[..., Any]]


def _as_operation(key: Operation | str) -> Operation:
    if isinstance(key, Operation):
        return key
    try:
        return Operation(key)
    except ValueError:
        raise ValueError(f"Unknown operation name: {key!r}") from None


def bind_backend(target: Any, *, strict: bool = False) -> Backend:
    """Build an operation table from *target*.

    *target* is either a mapping of operation (or operation name) to
    callable, or an object whose methods are named after operations.
    With ``strict=True`` every operation must be provided.
    """
    table: dict[Operation, Callable[..., Any]] = {}

    if isinstance(target, Mapping):
        for key, func in target.items():
            if not callable(func):
                raise ValueError(f"Backend entry for {key!r} is not callable")
            table[_as_operation(key)] = func
    else:
        for op in Operation:
            func = getattr(target, op.value, None)
            if callable(func):
                table[op] = func

    missing = [op.value for op in Operation if op not in table]
    if missing:
        if strict:
            raise ValueError(f"Backend does not implement: {', '.join(missing)}")
        logger.debug("Backend does not implement %d operation(s): %s", len(missing), missing)

    return MappingProxyType(table)
