"""Compact response formatting for tool outputs.

Provides the ``+``/``!`` result-line convention, JSON rendering of
backend payloads, batch summaries and fuzzy suggestions.
"""

from __future__ import annotations

import difflib
import json
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from discord_unified.dispatcher import BatchResult

PREVIEW_LENGTH = 100


def format_result(success: bool, message: str) -> str:
    """Prefix *message* with ``+`` on success and ``!`` on failure."""
    marker = "+" if success else "!"
    return f"{marker} {message}"


def format_data(data: Any) -> str:
    """Render a backend payload as text: strings as-is, anything else as JSON."""
    if isinstance(data, str):
        return data
    return json.dumps(data, indent=2, default=str)


def _preview(data: Any) -> Any:
    if isinstance(data, str) and len(data) > PREVIEW_LENGTH:
        return data[:PREVIEW_LENGTH] + "..."
    return data


def summarize_batch(result: BatchResult, labels: Sequence[str]) -> dict[str, Any]:
    """Build the per-request batch summary.

    *labels* names each submitted request (``category.action``); its length
    is the number of submitted requests, so unattempted ones are counted as
    skipped. String payloads are shortened to :data:`PREVIEW_LENGTH`
    characters.
    """
    entries: list[dict[str, Any]] = []
    for index, item in enumerate(result.results):
        entry: dict[str, Any] = {
            "request": labels[index] if index < len(labels) else f"#{index + 1}",
            "success": item.success,
        }
        if item.error:
            entry["error"] = item.error
        if item.data is not None:
            entry["data"] = _preview(item.data)
        entries.append(entry)

    return {
        "success": result.success,
        "completed": result.completed_count,
        "failed": result.failed_count,
        "skipped": result.skipped_count(len(labels)),
        "results": entries,
    }


def suggest(input_str: str, candidates: list[str]) -> str | None:
    """Find the closest match for *input_str* among *candidates*.

    Uses difflib's SequenceMatcher for fuzzy matching. Returns the best
    match if the similarity ratio is above 0.6, otherwise None.
    """
    if not candidates:
        return None
    matches = difflib.get_close_matches(input_str, candidates, n=1, cutoff=0.6)
    return matches[0] if matches else None
