"""Discord Unified: generic MCP dispatch over Discord operations."""

from discord_unified.backend import Backend, bind_backend
from discord_unified.dispatcher import (
    BatchRequest,
    BatchResult,
    DispatchRequest,
    ExecutionResult,
    QueryRequest,
    UnifiedDispatcher,
)
from discord_unified.errors import (
    DispatchError,
    InvalidAction,
    InvalidCategory,
    InvalidResource,
    ResolutionFailure,
    UnderlyingOperationFailure,
)
from discord_unified.formatter import format_data, format_result, suggest, summarize_batch
from discord_unified.mappings import CATEGORIES, QUERIES, build_default_registry
from discord_unified.normalizer import normalize
from discord_unified.operations import (
    SIGNATURES,
    BoundCall,
    Operation,
    OperationSignature,
    bind_call,
    positional_args,
)
from discord_unified.registry import (
    ActionRegistry,
    ActionSpec,
    CategorySpec,
    QuerySpec,
    Resolution,
)
from discord_unified.server import create_discord_server

__all__ = [
    # Operations
    "Operation",
    "OperationSignature",
    "BoundCall",
    "SIGNATURES",
    "positional_args",
    "bind_call",
    # Normalizer
    "normalize",
    # Registry
    "ActionSpec",
    "CategorySpec",
    "QuerySpec",
    "Resolution",
    "ActionRegistry",
    "CATEGORIES",
    "QUERIES",
    "build_default_registry",
    # Backend
    "Backend",
    "bind_backend",
    # Dispatcher
    "UnifiedDispatcher",
    "DispatchRequest",
    "QueryRequest",
    "BatchRequest",
    "ExecutionResult",
    "BatchResult",
    # Errors
    "DispatchError",
    "InvalidCategory",
    "InvalidAction",
    "InvalidResource",
    "ResolutionFailure",
    "UnderlyingOperationFailure",
    # Formatter
    "format_result",
    "format_data",
    "summarize_batch",
    "suggest",
    # Server
    "create_discord_server",
]
