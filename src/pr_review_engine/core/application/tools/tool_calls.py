"""Closed set of agent tool calls, validated before dispatch.

The agent sends ``(name, arguments)``; :func:`parse_tool_call` folds the name
into the ``tool`` discriminator and validates the whole payload against the
matching model. Arguments may use camelCase (``contextLines``) or snake_case.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from pr_review_engine.core.application.exceptions import ToolCallValidationError

DEFAULT_CONTEXT_LINES = 5
DEFAULT_MAX_RESULTS = 200
MAX_RESULTS_LIMIT = 5000


class _ToolCall(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )


class ReadFilesCall(_ToolCall):
    """Read the full contents of one or more files in the workspace."""

    tool: Literal["read_files"] = "read_files"
    paths: list[str] = Field(min_length=1, description="Workspace-relative file paths.")


class SearchWindowCall(_ToolCall):
    """Find every line of a file containing a text, with surrounding context."""

    tool: Literal["search_window"] = "search_window"
    path: str = Field(min_length=1, description="Workspace-relative file path.")
    text: str = Field(min_length=1, description="Literal text to look for.")
    context_lines: int = Field(default=DEFAULT_CONTEXT_LINES, ge=0)


class SearchRepositoryCall(_ToolCall):
    """Search the whole repository for a literal or regular-expression query."""

    tool: Literal["search_repository"] = "search_repository"
    query: str = Field(min_length=1)
    case_sensitive: bool = False
    regex: bool = False
    word_boundary: bool = False
    extensions: list[str] | None = Field(default=None, description="e.g. ['ts', 'py']")
    paths: list[str] | None = Field(default=None, description="Directories or files to scope to.")
    context_lines: int = Field(default=DEFAULT_CONTEXT_LINES, ge=0)
    max_results: int = Field(default=DEFAULT_MAX_RESULTS, ge=1, le=MAX_RESULTS_LIMIT)


class DependencyGraphCall(_ToolCall):
    """List what a file imports and which files import it."""

    tool: Literal["dependency_graph"] = "dependency_graph"
    path: str = Field(min_length=1)
    depth: int = Field(default=1, ge=1)


ToolCall = Annotated[
    ReadFilesCall | SearchWindowCall | SearchRepositoryCall | DependencyGraphCall,
    Field(discriminator="tool"),
]

TOOL_CALL_MODELS: tuple[type[_ToolCall], ...] = (
    ReadFilesCall,
    SearchWindowCall,
    SearchRepositoryCall,
    DependencyGraphCall,
)

_ADAPTER: TypeAdapter[ToolCall] = TypeAdapter(ToolCall)


def parse_tool_call(name: str, arguments: dict[str, Any] | None) -> ToolCall:
    """Validate an agent call; raises ``ToolCallValidationError`` on any mismatch."""
    payload = {**(arguments or {}), "tool": name}
    try:
        return _ADAPTER.validate_python(payload)
    except ValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'call'}: {err['msg']}" for err in exc.errors()
        )
        raise ToolCallValidationError(
            f"Invalid call to '{name}': {details}", context={"tool": name}
        ) from exc


def tool_schema(model: type[_ToolCall]) -> dict[str, Any]:
    """OpenAI-style function schema for a call model (discriminator hidden)."""
    schema = model.model_json_schema(by_alias=True)
    properties = {k: v for k, v in schema.get("properties", {}).items() if k != "tool"}
    required = [k for k in schema.get("required", []) if k != "tool"]
    name = model.model_fields["tool"].default
    return {
        "type": "function",
        "function": {
            "name": name,
            "description": (model.__doc__ or "").strip(),
            "parameters": {"type": "object", "properties": properties, "required": required},
        },
    }
