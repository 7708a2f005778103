"""Shared fixtures: a backend that records every call it receives."""

from __future__ import annotations

import pytest


class RecordingBackend:
    """Backend double with a handful of sync and async operations."""

    def __init__(self):
        self.calls: list[tuple[str, tuple]] = []

    def _record(self, name, *args):
        self.calls.append((name, args))

    async def send_message(self, channel_id, message):
        self._record("send_message", channel_id, message)
        return f"Message sent to {channel_id}"

    async def edit_message(self, channel_id, message_id, new_message):
        self._record("edit_message", channel_id, message_id, new_message)
        return "edited"

    async def delete_message(self, channel_id, message_id):
        self._record("delete_message", channel_id, message_id)
        raise RuntimeError(f"Unknown message {message_id}")

    def read_messages(self, channel_id, count):
        self._record("read_messages", channel_id, count)
        return [{"id": "1", "content": "hello"}]

    async def create_text_channel(self, guild_id, name, category_id):
        self._record("create_text_channel", guild_id, name, category_id)
        return {"id": "c1", "name": name}

    async def create_voice_channel(self, guild_id, name, category_id, user_limit, bitrate):
        self._record("create_voice_channel", guild_id, name, category_id, user_limit, bitrate)
        return {"id": "v1", "name": name}

    async def edit_channel_advanced(self, guild_id, channel_id, options):
        self._record("edit_channel_advanced", guild_id, channel_id, options)
        return "updated"

    async def set_volume(self, guild_id, volume):
        self._record("set_volume", guild_id, volume)
        return f"Volume set to {volume}"

    async def get_members(self, guild_id, limit, after):
        self._record("get_members", guild_id, limit, after)
        return []

    async def get_roles(self, guild_id):
        self._record("get_roles", guild_id)
        raise ValueError()

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]


@pytest.fixture
def backend() -> RecordingBackend:
    return RecordingBackend()
