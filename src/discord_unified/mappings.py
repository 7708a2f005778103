"""Static category, action and query-resource tables.

Renaming tables are keyed on *normalized* parameter names: ``content`` and
``text`` have already become ``message`` and ``limit`` has become ``count``
by the time an action's ``param_map`` is applied.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from types import MappingProxyType
from typing import Any

from discord_unified.operations import Operation as Op
from discord_unified.registry import ActionRegistry, ActionSpec, CategorySpec, QuerySpec

logger = logging.getLogger(__name__)

CHANNEL_TYPES: dict[str, Op] = {
    "text": Op.CREATE_TEXT_CHANNEL,
    "voice": Op.CREATE_VOICE_CHANNEL,
    "forum": Op.CREATE_FORUM_CHANNEL,
    "announcement": Op.CREATE_ANNOUNCEMENT_CHANNEL,
    "stage": Op.CREATE_STAGE_CHANNEL,
    "category": Op.CREATE_CATEGORY,
}


def resolve_channel_type(params: dict[str, Any]) -> tuple[Op, dict[str, Any]]:
    """Pick the channel-creation operation from the ``type`` discriminator."""
    params = dict(params)
    channel_type = params.pop("type", None) or "text"
    operation = CHANNEL_TYPES.get(channel_type) if isinstance(channel_type, str) else None
    if operation is None:
        logger.warning("Unknown channel type %r, creating a text channel", channel_type)
        operation = Op.CREATE_TEXT_CHANNEL
    return operation, params


_COUNT_AS_LIMIT = MappingProxyType({"count": "limit"})
_MESSAGE_AS_CONTENT = MappingProxyType({"message": "content"})
_MESSAGE_AS_NEW = MappingProxyType({"message": "newMessage"})

CATEGORIES: tuple[CategorySpec, ...] = (
    CategorySpec(
        "message",
        "Message operations in channels",
        (
            ActionSpec("send", Op.SEND_MESSAGE, "Send a message. Params: channelId, content"),
            ActionSpec(
                "edit", Op.EDIT_MESSAGE,
                "Edit a message. Params: channelId, messageId, content",
                param_map=_MESSAGE_AS_NEW,
            ),
            ActionSpec("delete", Op.DELETE_MESSAGE, "Delete a message. Params: channelId, messageId"),
            ActionSpec(
                "bulk_delete", Op.BULK_DELETE_MESSAGES,
                "Delete multiple messages. Params: channelId, messageIds[], filterOld?",
            ),
            ActionSpec("pin", Op.PIN_MESSAGE, "Pin a message. Params: channelId, messageId"),
            ActionSpec("unpin", Op.UNPIN_MESSAGE, "Unpin a message. Params: channelId, messageId"),
            ActionSpec("react", Op.ADD_REACTION, "Add reaction. Params: channelId, messageId, emoji"),
            ActionSpec(
                "unreact", Op.REMOVE_REACTION,
                "Remove reaction. Params: channelId, messageId, emoji",
            ),
            ActionSpec(
                "crosspost", Op.CROSSPOST_MESSAGE,
                "Crosspost announcement. Params: channelId, messageId",
            ),
        ),
        query_resource="messages",
    ),
    CategorySpec(
        "dm",
        "Direct message operations",
        (
            ActionSpec("send", Op.SEND_PRIVATE_MESSAGE, "Send DM. Params: userId, content"),
            ActionSpec(
                "edit", Op.EDIT_PRIVATE_MESSAGE,
                "Edit DM. Params: userId, messageId, content",
                param_map=_MESSAGE_AS_NEW,
            ),
            ActionSpec("delete", Op.DELETE_PRIVATE_MESSAGE, "Delete DM. Params: userId, messageId"),
            ActionSpec(
                "get_user_id", Op.GET_USER_ID_BY_NAME,
                "Get user ID by name. Params: username, guildId?",
            ),
        ),
        query_resource="dm_messages",
    ),
    CategorySpec(
        "channel",
        "Channel management",
        (
            ActionSpec(
                "create", Op.CREATE_TEXT_CHANNEL,
                "Create channel. Params: name, type (text/voice/forum/announcement/stage/category), "
                "guildId?, categoryId?, topic?, userLimit?, bitrate?, nsfw?",
                resolver=resolve_channel_type,
                candidates=tuple(CHANNEL_TYPES.values()),
            ),
            ActionSpec(
                "edit", Op.EDIT_CHANNEL_ADVANCED,
                "Edit channel. Params: channelId, guildId?, name?, topic?, slowmode?, nsfw?, etc.",
            ),
            ActionSpec("delete", Op.DELETE_CHANNEL, "Delete channel. Params: channelId, guildId?"),
            ActionSpec(
                "find", Op.FIND_CHANNEL,
                "Find channel by name. Params: name, guildId?",
                param_map={"name": "channelName"},
            ),
            ActionSpec(
                "move", Op.MOVE_CHANNEL_TO_CATEGORY,
                "Move to category. Params: channelId, categoryId, guildId?",
            ),
            ActionSpec(
                "set_position", Op.SET_CHANNEL_POSITION,
                "Set position. Params: channelId, position, guildId?",
            ),
            ActionSpec(
                "set_positions", Op.SET_CHANNEL_POSITIONS,
                "Bulk set positions. Params: positions[], guildId?",
                param_map={"positions": "channelPositions"},
            ),
            ActionSpec(
                "set_private", Op.SET_CHANNEL_PRIVATE,
                "Set privacy. Params: channelId, isPrivate, allowedRoles?, guildId?",
            ),
            ActionSpec(
                "organize", Op.ORGANIZE_CHANNELS,
                "Organize channels. Params: organization, guildId?",
            ),
        ),
        query_resource="channels",
    ),
    CategorySpec(
        "category",
        "Category management",
        (
            ActionSpec("create", Op.CREATE_CATEGORY, "Create category. Params: name, guildId?"),
            ActionSpec("delete", Op.DELETE_CATEGORY, "Delete category. Params: categoryId, guildId?"),
            ActionSpec(
                "find", Op.FIND_CATEGORY,
                "Find category by name. Params: name, guildId?",
                param_map={"name": "categoryName"},
            ),
            ActionSpec(
                "set_position", Op.SET_CATEGORY_POSITION,
                "Set position. Params: categoryId, position, guildId?",
            ),
            ActionSpec(
                "set_private", Op.SET_CATEGORY_PRIVATE,
                "Set privacy. Params: categoryId, isPrivate, allowedRoles?, guildId?",
            ),
            ActionSpec(
                "list_channels", Op.LIST_CHANNELS_IN_CATEGORY,
                "List channels in category. Params: categoryId, guildId?",
            ),
        ),
        query_resource="category_channels",
    ),
    CategorySpec(
        "role",
        "Role management",
        (
            ActionSpec("create", Op.CREATE_ROLE, "Create role. Params: name, color?, permissions?, guildId?"),
            ActionSpec(
                "edit", Op.EDIT_ROLE,
                "Edit role. Params: roleId, name?, color?, permissions?, guildId?",
            ),
            ActionSpec("delete", Op.DELETE_ROLE, "Delete role. Params: roleId, guildId?"),
            ActionSpec(
                "set_positions", Op.SET_ROLE_POSITIONS,
                "Set role positions. Params: positions[], guildId?",
                param_map={"positions": "rolePositions"},
            ),
            ActionSpec(
                "add_to_member", Op.ADD_ROLE_TO_MEMBER,
                "Add role to member. Params: userId, roleId, guildId?",
            ),
            ActionSpec(
                "remove_from_member", Op.REMOVE_ROLE_FROM_MEMBER,
                "Remove role from member. Params: userId, roleId, guildId?",
            ),
        ),
        query_resource="roles",
    ),
    CategorySpec(
        "member",
        "Member management",
        (
            ActionSpec("edit", Op.EDIT_MEMBER, "Edit member. Params: userId, nickname?, roles?, guildId?"),
            ActionSpec(
                "search", Op.SEARCH_MEMBERS,
                "Search members. Params: query?, limit?, guildId?",
                param_map=_COUNT_AS_LIMIT,
            ),
        ),
        query_resource="members",
    ),
    CategorySpec(
        "server",
        "Server settings",
        (
            ActionSpec(
                "edit", Op.EDIT_SERVER,
                "Edit server. Params: name?, description?, icon?, banner?, verificationLevel?, guildId?",
            ),
            ActionSpec(
                "edit_welcome", Op.EDIT_WELCOME_SCREEN,
                "Edit welcome screen. Params: enabled?, description?, welcomeChannels?, guildId?",
            ),
        ),
        query_resource="server",
    ),
    CategorySpec(
        "voice",
        "Voice channel operations",
        (
            ActionSpec("join", Op.JOIN_VOICE_CHANNEL, "Join voice channel. Params: channelId, guildId"),
            ActionSpec("leave", Op.LEAVE_VOICE_CHANNEL, "Leave voice channel. Params: channelId, guildId"),
            ActionSpec(
                "play", Op.PLAY_AUDIO,
                "Play audio. Params: url, guildId",
                param_map={"url": "audioUrl"},
            ),
            ActionSpec("stop", Op.STOP_AUDIO, "Stop audio. Params: guildId"),
            ActionSpec("set_volume", Op.SET_VOLUME, "Set volume (0-200). Params: volume, guildId"),
        ),
        query_resource="voice_connections",
    ),
    CategorySpec(
        "moderation",
        "Moderation tools",
        (
            ActionSpec(
                "create_automod", Op.CREATE_AUTOMOD_RULE,
                "Create automod rule. Params: name, triggerType, eventType?, keywordFilter?, "
                "presets?, allowList?, mentionLimit?, enabled?, guildId?",
            ),
            ActionSpec(
                "edit_automod", Op.EDIT_AUTOMOD_RULE,
                "Edit automod rule. Params: ruleId, name?, enabled?, keywordFilter?, guildId?",
            ),
            ActionSpec("delete_automod", Op.DELETE_AUTOMOD_RULE, "Delete automod rule. Params: ruleId, guildId?"),
            ActionSpec("bulk_privacy", Op.BULK_SET_PRIVACY, "Bulk set privacy. Params: targets[], guildId?"),
            ActionSpec(
                "comprehensive", Op.COMPREHENSIVE_CHANNEL_MANAGEMENT,
                "Comprehensive channel management. Params: operations[], guildId?",
            ),
        ),
        query_resource="automod_rules",
    ),
    CategorySpec(
        "webhook",
        "Webhook management",
        (
            ActionSpec("create", Op.CREATE_WEBHOOK, "Create webhook. Params: channelId, name"),
            ActionSpec("delete", Op.DELETE_WEBHOOK, "Delete webhook. Params: webhookId"),
            ActionSpec("send", Op.SEND_WEBHOOK_MESSAGE, "Send via webhook. Params: webhookUrl, content"),
        ),
        query_resource="webhooks",
    ),
    CategorySpec(
        "event",
        "Server events",
        (
            ActionSpec(
                "create", Op.CREATE_EVENT,
                "Create event. Params: name, startTime, description?, endTime?, location?, "
                "channelId?, guildId?",
            ),
            ActionSpec(
                "edit", Op.EDIT_EVENT,
                "Edit event. Params: eventId, name?, startTime?, endTime?, description?, "
                "location?, guildId?",
            ),
            ActionSpec("delete", Op.DELETE_EVENT, "Delete event. Params: eventId, guildId?"),
        ),
        query_resource="events",
    ),
    CategorySpec(
        "emoji",
        "Custom emoji",
        (
            ActionSpec("create", Op.CREATE_EMOJI, "Create emoji. Params: name, imageUrl, roles?, guildId?"),
            ActionSpec("delete", Op.DELETE_EMOJI, "Delete emoji. Params: emojiId, guildId?"),
        ),
        query_resource="emojis",
    ),
    CategorySpec(
        "sticker",
        "Custom stickers",
        (
            ActionSpec(
                "create", Op.CREATE_STICKER,
                "Create sticker. Params: name, description, tags, imageUrl, guildId?",
            ),
            ActionSpec("delete", Op.DELETE_STICKER, "Delete sticker. Params: stickerId, guildId?"),
        ),
        query_resource="stickers",
    ),
    CategorySpec(
        "invite",
        "Invite links",
        (
            ActionSpec(
                "create", Op.CREATE_INVITE,
                "Create invite. Params: channelId, maxAge?, maxUses?, temporary?",
            ),
            ActionSpec("delete", Op.DELETE_INVITE, "Delete invite. Params: inviteCode"),
        ),
        query_resource="invites",
    ),
    CategorySpec(
        "file",
        "File operations",
        (
            ActionSpec(
                "upload", Op.UPLOAD_FILE,
                "Upload file. Params: channelId, filePath?, fileName?, content?",
                param_map=_MESSAGE_AS_CONTENT,
            ),
            ActionSpec(
                "get_attachments", Op.GET_MESSAGE_ATTACHMENTS,
                "Get attachments. Params: channelId, messageId",
            ),
            ActionSpec(
                "read_images", Op.READ_IMAGES,
                "Read images. Params: channelId, messageId?, limit?, includeMetadata?, downloadImages?",
                param_map=_COUNT_AS_LIMIT,
            ),
        ),
        query_resource="attachments",
    ),
    CategorySpec(
        "interactive",
        "Interactive components",
        (
            ActionSpec(
                "send_embed", Op.SEND_EMBED,
                "Send embed. Params: channelId, title, description?, color?, fields?, footer?, "
                "image?, thumbnail?",
            ),
            ActionSpec(
                "send_button", Op.SEND_BUTTON,
                "Send buttons. Params: channelId, content, buttons[]",
                param_map=_MESSAGE_AS_CONTENT,
            ),
            ActionSpec(
                "send_select_menu", Op.SEND_SELECT_MENU,
                "Send select menu. Params: channelId, content, customId, placeholder?, "
                "minValues?, maxValues?, options[]",
                param_map=_MESSAGE_AS_CONTENT,
            ),
            ActionSpec(
                "send_modal", Op.SEND_MODAL,
                "Send modal (requires interaction). Params: interactionId, title, customId, components[]",
            ),
        ),
    ),
    CategorySpec(
        "analytics",
        "Analytics and logging",
        (
            ActionSpec(
                "export_chat", Op.EXPORT_CHAT_LOG,
                "Export chat log. Params: channelId, format?, limit?, dateRange?",
                param_map=_COUNT_AS_LIMIT,
            ),
            ActionSpec(
                "get_history", Op.GET_MESSAGE_HISTORY,
                "Get message history. Params: channelId, limit?, before?, after?",
                param_map=_COUNT_AS_LIMIT,
            ),
        ),
        query_resource="message_history",
    ),
)

QUERIES: tuple[QuerySpec, ...] = (
    QuerySpec("messages", Op.READ_MESSAGES, "Recent channel messages. Filters: channelId"),
    QuerySpec("pinned_messages", Op.GET_PINNED_MESSAGES, "Pinned messages. Filters: channelId"),
    QuerySpec(
        "message_history", Op.GET_MESSAGE_HISTORY,
        "Message history. Filters: channelId, before?, after?",
        param_map=_COUNT_AS_LIMIT,
    ),
    QuerySpec("attachments", Op.GET_MESSAGE_ATTACHMENTS, "Message attachments. Filters: channelId, messageId"),
    QuerySpec("dm_messages", Op.READ_PRIVATE_MESSAGES, "Direct messages. Filters: userId"),
    QuerySpec("channels", Op.LIST_CHANNELS, "All channels. Filters: guildId?"),
    QuerySpec("channel_structure", Op.GET_CHANNEL_STRUCTURE, "Channel tree. Filters: guildId?"),
    QuerySpec(
        "category_channels", Op.LIST_CHANNELS_IN_CATEGORY,
        "Channels in a category. Filters: categoryId, guildId?",
    ),
    QuerySpec(
        "members", Op.GET_MEMBERS,
        "Server members. Filters: guildId?, after?",
        param_map=_COUNT_AS_LIMIT,
    ),
    QuerySpec("member", Op.GET_MEMBER_INFO, "One member. Filters: userId, guildId?"),
    QuerySpec("roles", Op.GET_ROLES, "Server roles. Filters: guildId?"),
    QuerySpec("server", Op.GET_SERVER_INFO, "Server info. Filters: guildId?"),
    QuerySpec("server_stats", Op.GET_SERVER_STATS, "Server statistics. Filters: guildId?"),
    QuerySpec("server_widget", Op.GET_SERVER_WIDGET, "Server widget. Filters: guildId?"),
    QuerySpec("welcome_screen", Op.GET_WELCOME_SCREEN, "Welcome screen. Filters: guildId?"),
    QuerySpec("events", Op.GET_EVENTS, "Scheduled events. Filters: guildId?"),
    QuerySpec("invites", Op.GET_INVITES, "Invite links. Filters: guildId?"),
    QuerySpec("webhooks", Op.LIST_WEBHOOKS, "Channel webhooks. Filters: channelId"),
    QuerySpec("emojis", Op.GET_EMOJIS, "Custom emoji. Filters: guildId?"),
    QuerySpec("stickers", Op.GET_STICKERS, "Custom stickers. Filters: guildId?"),
    QuerySpec("automod_rules", Op.GET_AUTOMOD_RULES, "Automod rules. Filters: guildId?"),
    QuerySpec("voice_connections", Op.GET_VOICE_CONNECTIONS, "Active voice connections"),
)


@lru_cache(maxsize=None)
def build_default_registry() -> ActionRegistry:
    """Return the process-wide registry built from :data:`CATEGORIES` and :data:`QUERIES`."""
    return ActionRegistry(CATEGORIES, QUERIES)
