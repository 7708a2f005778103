"""Underlying Discord operations and their positional signatures.

Each backend operation is a member of the closed :class:`Operation` enum.
Its argument order lives in :data:`SIGNATURES`, which is checked for
completeness at import time so that an operation can never be called with
a guessed argument order.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any

from discord_unified.errors import ResolutionFailure

OPTIONS_SLOT = "options"

# Optional keys packed into the trailing ``options`` argument.
OPTION_KEYS: tuple[str, ...] = (
    "topic",
    "slowmode",
    "userLimit",
    "bitrate",
    "isPrivate",
    "allowedRoles",
    "allowedMembers",
    "syncToCategory",
    "applyToChannels",
    "categoryId",
    "defaultReactionEmoji",
    "nsfw",
    "rateLimitPerUser",
)


class Operation(str, Enum):
    """Every operation the backend can be asked to perform."""

    # Messages
    SEND_MESSAGE = "send_message"
    EDIT_MESSAGE = "edit_message"
    DELETE_MESSAGE = "delete_message"
    READ_MESSAGES = "read_messages"
    PIN_MESSAGE = "pin_message"
    UNPIN_MESSAGE = "unpin_message"
    GET_PINNED_MESSAGES = "get_pinned_messages"
    BULK_DELETE_MESSAGES = "bulk_delete_messages"
    CROSSPOST_MESSAGE = "crosspost_message"
    ADD_REACTION = "add_reaction"
    REMOVE_REACTION = "remove_reaction"

    # Direct messages
    GET_USER_ID_BY_NAME = "get_user_id_by_name"
    SEND_PRIVATE_MESSAGE = "send_private_message"
    EDIT_PRIVATE_MESSAGE = "edit_private_message"
    DELETE_PRIVATE_MESSAGE = "delete_private_message"
    READ_PRIVATE_MESSAGES = "read_private_messages"

    # Channels
    CREATE_TEXT_CHANNEL = "create_text_channel"
    CREATE_VOICE_CHANNEL = "create_voice_channel"
    CREATE_FORUM_CHANNEL = "create_forum_channel"
    CREATE_ANNOUNCEMENT_CHANNEL = "create_announcement_channel"
    CREATE_STAGE_CHANNEL = "create_stage_channel"
    EDIT_CHANNEL_ADVANCED = "edit_channel_advanced"
    DELETE_CHANNEL = "delete_channel"
    FIND_CHANNEL = "find_channel"
    LIST_CHANNELS = "list_channels"
    SET_CHANNEL_POSITION = "set_channel_position"
    SET_CHANNEL_POSITIONS = "set_channel_positions"
    MOVE_CHANNEL_TO_CATEGORY = "move_channel_to_category"
    ORGANIZE_CHANNELS = "organize_channels"
    GET_CHANNEL_STRUCTURE = "get_channel_structure"

    # Categories
    CREATE_CATEGORY = "create_category"
    DELETE_CATEGORY = "delete_category"
    FIND_CATEGORY = "find_category"
    LIST_CHANNELS_IN_CATEGORY = "list_channels_in_category"
    SET_CATEGORY_POSITION = "set_category_position"

    # Privacy
    SET_CHANNEL_PRIVATE = "set_channel_private"
    SET_CATEGORY_PRIVATE = "set_category_private"
    BULK_SET_PRIVACY = "bulk_set_privacy"
    COMPREHENSIVE_CHANNEL_MANAGEMENT = "comprehensive_channel_management"

    # Roles
    CREATE_ROLE = "create_role"
    DELETE_ROLE = "delete_role"
    EDIT_ROLE = "edit_role"
    ADD_ROLE_TO_MEMBER = "add_role_to_member"
    REMOVE_ROLE_FROM_MEMBER = "remove_role_from_member"
    GET_ROLES = "get_roles"
    SET_ROLE_POSITIONS = "set_role_positions"

    # Members
    GET_MEMBERS = "get_members"
    SEARCH_MEMBERS = "search_members"
    EDIT_MEMBER = "edit_member"
    GET_MEMBER_INFO = "get_member_info"

    # Voice
    JOIN_VOICE_CHANNEL = "join_voice_channel"
    LEAVE_VOICE_CHANNEL = "leave_voice_channel"
    PLAY_AUDIO = "play_audio"
    STOP_AUDIO = "stop_audio"
    SET_VOLUME = "set_volume"
    GET_VOICE_CONNECTIONS = "get_voice_connections"

    # Events
    CREATE_EVENT = "create_event"
    EDIT_EVENT = "edit_event"
    DELETE_EVENT = "delete_event"
    GET_EVENTS = "get_events"

    # Invites
    CREATE_INVITE = "create_invite"
    DELETE_INVITE = "delete_invite"
    GET_INVITES = "get_invites"

    # Webhooks
    CREATE_WEBHOOK = "create_webhook"
    DELETE_WEBHOOK = "delete_webhook"
    LIST_WEBHOOKS = "list_webhooks"
    SEND_WEBHOOK_MESSAGE = "send_webhook_message"

    # Emoji and stickers
    CREATE_EMOJI = "create_emoji"
    DELETE_EMOJI = "delete_emoji"
    GET_EMOJIS = "get_emojis"
    CREATE_STICKER = "create_sticker"
    DELETE_STICKER = "delete_sticker"
    GET_STICKERS = "get_stickers"

    # Files
    UPLOAD_FILE = "upload_file"
    GET_MESSAGE_ATTACHMENTS = "get_message_attachments"
    READ_IMAGES = "read_images"

    # Automod
    CREATE_AUTOMOD_RULE = "create_automod_rule"
    EDIT_AUTOMOD_RULE = "edit_automod_rule"
    DELETE_AUTOMOD_RULE = "delete_automod_rule"
    GET_AUTOMOD_RULES = "get_automod_rules"

    # Server
    GET_SERVER_INFO = "get_server_info"
    EDIT_SERVER = "edit_server"
    GET_SERVER_STATS = "get_server_stats"
    GET_SERVER_WIDGET = "get_server_widget"
    GET_WELCOME_SCREEN = "get_welcome_screen"
    EDIT_WELCOME_SCREEN = "edit_welcome_screen"

    # Interactive components
    SEND_EMBED = "send_embed"
    SEND_BUTTON = "send_button"
    SEND_SELECT_MENU = "send_select_menu"
    SEND_MODAL = "send_modal"

    # Analytics
    GET_MESSAGE_HISTORY = "get_message_history"
    EXPORT_CHAT_LOG = "export_chat_log"


@dataclass(frozen=True)
class OperationSignature:
    """Ordered parameter names an operation takes positionally."""

    operation: Operation
    params: tuple[str, ...]
    option_keys: tuple[str, ...] = OPTION_KEYS

    @property
    def has_options(self) -> bool:
        """Whether the ``options`` parameter is a packed slot."""
        return OPTIONS_SLOT in self.params and bool(self.option_keys)

    def accepts(self, key: str) -> bool:
        """Whether *key* ends up somewhere in the positional call."""
        if key in self.params:
            return True
        return self.has_options and key in self.option_keys

    def bind(self, parameters: Mapping[str, Any]) -> tuple[Any, ...]:
        """Order *parameters* into this signature's positional arguments.

        Missing keys become ``None``. Undeclared keys are dropped. For
        signatures with an ``options`` slot, every present option key is
        copied into one dict emitted at that position (``None`` when empty).
        """
        if not self.has_options:
            return tuple(parameters.get(key) for key in self.params)

        options = {key: parameters[key] for key in self.option_keys if key in parameters}
        args: list[Any] = []
        for key in self.params:
            if key == OPTIONS_SLOT:
                args.append(options or None)
            else:
                args.append(parameters.get(key))
        return tuple(args)


@dataclass(frozen=True)
class BoundCall:
    """An operation together with its positional arguments."""

    operation: Operation
    args: tuple[Any, ...] = ()

    def __str__(self) -> str:
        return f"{self.operation.value}({', '.join(repr(a) for a in self.args)})"


_OP = Operation

_PARAMS: dict[Operation, tuple[str, ...]] = {
    # Messages
    _OP.SEND_MESSAGE: ("channelId", "message"),
    _OP.EDIT_MESSAGE: ("channelId", "messageId", "newMessage"),
    _OP.DELETE_MESSAGE: ("channelId", "messageId"),
    _OP.READ_MESSAGES: ("channelId", "count"),
    _OP.PIN_MESSAGE: ("channelId", "messageId"),
    _OP.UNPIN_MESSAGE: ("channelId", "messageId"),
    _OP.GET_PINNED_MESSAGES: ("channelId",),
    _OP.BULK_DELETE_MESSAGES: ("channelId", "messageIds", "filterOld"),
    _OP.CROSSPOST_MESSAGE: ("channelId", "messageId"),
    _OP.ADD_REACTION: ("channelId", "messageId", "emoji"),
    _OP.REMOVE_REACTION: ("channelId", "messageId", "emoji"),
    # Direct messages
    _OP.GET_USER_ID_BY_NAME: ("username", "guildId"),
    _OP.SEND_PRIVATE_MESSAGE: ("userId", "message"),
    _OP.EDIT_PRIVATE_MESSAGE: ("userId", "messageId", "newMessage"),
    _OP.DELETE_PRIVATE_MESSAGE: ("userId", "messageId"),
    _OP.READ_PRIVATE_MESSAGES: ("userId", "count"),
    # Channels
    _OP.CREATE_TEXT_CHANNEL: ("guildId", "name", "categoryId"),
    _OP.CREATE_VOICE_CHANNEL: ("guildId", "name", "categoryId", "userLimit", "bitrate"),
    _OP.CREATE_FORUM_CHANNEL: ("guildId", "name", "categoryId", "options"),
    _OP.CREATE_ANNOUNCEMENT_CHANNEL: ("guildId", "name", "categoryId", "options"),
    _OP.CREATE_STAGE_CHANNEL: ("guildId", "name", "categoryId", "options"),
    _OP.EDIT_CHANNEL_ADVANCED: ("guildId", "channelId", "options"),
    _OP.DELETE_CHANNEL: ("guildId", "channelId"),
    _OP.FIND_CHANNEL: ("guildId", "channelName"),
    _OP.LIST_CHANNELS: ("guildId",),
    _OP.SET_CHANNEL_POSITION: ("guildId", "channelId", "position"),
    _OP.SET_CHANNEL_POSITIONS: ("guildId", "channelPositions"),
    _OP.MOVE_CHANNEL_TO_CATEGORY: ("guildId", "channelId", "categoryId"),
    _OP.ORGANIZE_CHANNELS: ("guildId", "organization"),
    _OP.GET_CHANNEL_STRUCTURE: ("guildId",),
    # Categories
    _OP.CREATE_CATEGORY: ("guildId", "name"),
    _OP.DELETE_CATEGORY: ("guildId", "categoryId"),
    _OP.FIND_CATEGORY: ("guildId", "categoryName"),
    _OP.LIST_CHANNELS_IN_CATEGORY: ("guildId", "categoryId"),
    _OP.SET_CATEGORY_POSITION: ("guildId", "categoryId", "position"),
    # Privacy
    _OP.SET_CHANNEL_PRIVATE: ("guildId", "channelId", "options"),
    _OP.SET_CATEGORY_PRIVATE: ("guildId", "categoryId", "options"),
    _OP.BULK_SET_PRIVACY: ("guildId", "targets"),
    _OP.COMPREHENSIVE_CHANNEL_MANAGEMENT: ("guildId", "operations"),
    # Roles
    _OP.CREATE_ROLE: ("guildId", "name", "color", "permissions"),
    _OP.DELETE_ROLE: ("guildId", "roleId"),
    _OP.EDIT_ROLE: ("guildId", "roleId", "name", "color", "permissions"),
    _OP.ADD_ROLE_TO_MEMBER: ("guildId", "userId", "roleId"),
    _OP.REMOVE_ROLE_FROM_MEMBER: ("guildId", "userId", "roleId"),
    _OP.GET_ROLES: ("guildId",),
    _OP.SET_ROLE_POSITIONS: ("guildId", "rolePositions"),
    # Members
    _OP.GET_MEMBERS: ("guildId", "limit", "after"),
    _OP.SEARCH_MEMBERS: ("guildId", "query", "limit"),
    _OP.EDIT_MEMBER: ("guildId", "userId", "nickname", "roles"),
    _OP.GET_MEMBER_INFO: ("guildId", "userId"),
    # Voice
    _OP.JOIN_VOICE_CHANNEL: ("guildId", "channelId"),
    _OP.LEAVE_VOICE_CHANNEL: ("guildId", "channelId"),
    _OP.PLAY_AUDIO: ("guildId", "audioUrl"),
    _OP.STOP_AUDIO: ("guildId",),
    _OP.SET_VOLUME: ("guildId", "volume"),
    _OP.GET_VOICE_CONNECTIONS: (),
    # Events
    _OP.CREATE_EVENT: (
        "guildId", "name", "description", "startTime", "endTime", "location", "channelId",
    ),
    _OP.EDIT_EVENT: (
        "guildId", "eventId", "name", "description", "startTime", "endTime", "location",
    ),
    _OP.DELETE_EVENT: ("guildId", "eventId"),
    _OP.GET_EVENTS: ("guildId",),
    # Invites
    _OP.CREATE_INVITE: ("channelId", "maxAge", "maxUses", "temporary"),
    _OP.DELETE_INVITE: ("inviteCode",),
    _OP.GET_INVITES: ("guildId",),
    # Webhooks
    _OP.CREATE_WEBHOOK: ("channelId", "name"),
    _OP.DELETE_WEBHOOK: ("webhookId",),
    _OP.LIST_WEBHOOKS: ("channelId",),
    _OP.SEND_WEBHOOK_MESSAGE: ("webhookUrl", "message"),
    # Emoji and stickers
    _OP.CREATE_EMOJI: ("guildId", "name", "imageUrl", "roles"),
    _OP.DELETE_EMOJI: ("guildId", "emojiId"),
    _OP.GET_EMOJIS: ("guildId",),
    _OP.CREATE_STICKER: ("guildId", "name", "description", "tags", "imageUrl"),
    _OP.DELETE_STICKER: ("guildId", "stickerId"),
    _OP.GET_STICKERS: ("guildId",),
    # Files
    _OP.UPLOAD_FILE: ("channelId", "filePath", "fileName", "content"),
    _OP.GET_MESSAGE_ATTACHMENTS: ("channelId", "messageId"),
    _OP.READ_IMAGES: ("channelId", "messageId", "limit", "includeMetadata", "downloadImages"),
    # Automod
    _OP.CREATE_AUTOMOD_RULE: (
        "guildId", "name", "eventType", "triggerType", "keywordFilter",
        "presets", "allowList", "mentionLimit", "enabled",
    ),
    _OP.EDIT_AUTOMOD_RULE: (
        "guildId", "ruleId", "name", "enabled", "keywordFilter", "allowList", "mentionLimit",
    ),
    _OP.DELETE_AUTOMOD_RULE: ("guildId", "ruleId"),
    _OP.GET_AUTOMOD_RULES: ("guildId",),
    # Server
    _OP.GET_SERVER_INFO: ("guildId",),
    _OP.EDIT_SERVER: ("guildId", "name", "description", "icon", "banner", "verificationLevel"),
    _OP.GET_SERVER_STATS: ("guildId",),
    _OP.GET_SERVER_WIDGET: ("guildId",),
    _OP.GET_WELCOME_SCREEN: ("guildId",),
    _OP.EDIT_WELCOME_SCREEN: ("guildId", "enabled", "description", "welcomeChannels"),
    # Interactive components
    _OP.SEND_EMBED: (
        "channelId", "title", "description", "color", "fields", "footer", "image", "thumbnail",
    ),
    _OP.SEND_BUTTON: ("channelId", "content", "buttons"),
    _OP.SEND_SELECT_MENU: (
        "channelId", "content", "customId", "placeholder", "minValues", "maxValues", "options",
    ),
    _OP.SEND_MODAL: ("interactionId", "title", "customId", "components"),
    # Analytics
    _OP.GET_MESSAGE_HISTORY: ("channelId", "limit", "before", "after"),
    _OP.EXPORT_CHAT_LOG: ("channelId", "format", "limit", "dateRange"),
}


def build_signatures(
    params: Mapping[Operation, tuple[str, ...]],
    *,
    plain: frozenset[Operation] = frozenset(),
) -> Mapping[Operation, OperationSignature]:
    """Build a read-only signature table, rejecting incomplete input.

    Operations listed in *plain* treat an ``options`` parameter as an
    ordinary value instead of the packed options slot.
    """
    missing = [op.value for op in Operation if op not in params]
    if missing:
        raise ValueError(f"No argument order declared for: {', '.join(missing)}")
    table: dict[Operation, OperationSignature] = {}
    for op, names in params.items():
        if op in plain:
            table[op] = OperationSignature(op, names, option_keys=())
        else:
            table[op] = OperationSignature(op, tuple(names))
    return MappingProxyType(table)


# ``send_select_menu`` takes its menu entries as a plain ``options`` list.
SIGNATURES: Mapping[Operation, OperationSignature] = build_signatures(
    _PARAMS, plain=frozenset({Operation.SEND_SELECT_MENU})
)


def positional_args(
    operation: Operation,
    parameters: Mapping[str, Any],
    signatures: Mapping[Operation, OperationSignature] = SIGNATURES,
) -> tuple[Any, ...]:
    """Return the positional argument tuple for *operation*.

    Raises :class:`ResolutionFailure` if the operation has no declared
    signature in *signatures*.
    """
    signature = signatures.get(operation)
    if signature is None:
        raise ResolutionFailure(
            f"No argument order declared for operation {operation.value!r}"
        )
    return signature.bind(parameters)


def bind_call(
    operation: Operation,
    parameters: Mapping[str, Any],
    signatures: Mapping[Operation, OperationSignature] = SIGNATURES,
) -> BoundCall:
    """Position *parameters* for *operation* and wrap them in a :class:`BoundCall`."""
    return BoundCall(operation, positional_args(operation, parameters, signatures))
