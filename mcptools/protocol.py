"""Wire types shared by the tools: requests, results and tool descriptions."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


class ToolError(Exception):
    """Raised when a tool call fails outright instead of producing an error result."""


class ContentType(str, enum.Enum):
    """Kind of a content item."""

    TEXT = "text"
    IMAGE = "image"
    RESOURCE = "resource"


class Role(str, enum.Enum):
    """Intended audience of a piece of content."""

    ASSISTANT = "assistant"
    USER = "user"


def _mapping(data: Any, owner: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ToolError(f"{owner}: expected an object, got {type(data).__name__}")
    return data


def _require(data: Mapping[str, Any], key: str, owner: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ToolError(f"{owner}: missing field `{key}`") from None


def _string(value: Any, key: str, owner: str) -> str:
    if not isinstance(value, str):
        raise ToolError(f"{owner}: field `{key}` must be a string")
    return value


def _optional_string(data: Mapping[str, Any], key: str, owner: str) -> str | None:
    value = data.get(key)
    return None if value is None else _string(value, key, owner)


def _enum(cls: type[enum.Enum], value: Any) -> Any:
    try:
        return cls(value)
    except ValueError:
        raise ToolError(f"unknown {cls.__name__} variant: {value!r}") from None


def _put(out: dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        out[key] = value


@dataclass
class TextAnnotation:
    """Audience and priority hints attached to content."""

    audience: list[Role] = field(default_factory=list)
    priority: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "audience": [Role(role).value for role in self.audience],
            "priority": float(self.priority),
        }

    @classmethod
    def from_dict(cls, data: Any) -> TextAnnotation:
        data = _mapping(data, "TextAnnotation")
        audience = _require(data, "audience", "TextAnnotation")
        if not isinstance(audience, list):
            raise ToolError("TextAnnotation: field `audience` must be an array")
        priority = _require(data, "priority", "TextAnnotation")
        if isinstance(priority, bool) or not isinstance(priority, (int, float)):
            raise ToolError("TextAnnotation: field `priority` must be a number")
        return cls(audience=[_enum(Role, r) for r in audience], priority=float(priority))


@dataclass
class Content:
    """One item of tool output."""

    type: ContentType = ContentType.TEXT
    text: str | None = None
    mime_type: str | None = None
    data: str | None = None
    annotations: TextAnnotation | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.annotations is not None:
            out["annotations"] = self.annotations.to_dict()
        _put(out, "data", self.data)
        _put(out, "mimeType", self.mime_type)
        _put(out, "text", self.text)
        out["type"] = ContentType(self.type).value
        return out

    @classmethod
    def from_dict(cls, data: Any) -> Content:
        data = _mapping(data, "Content")
        annotations = data.get("annotations")
        return cls(
            type=_enum(ContentType, _require(data, "type", "Content")),
            text=_optional_string(data, "text", "Content"),
            mime_type=_optional_string(data, "mimeType", "Content"),
            data=_optional_string(data, "data", "Content"),
            annotations=None if annotations is None else TextAnnotation.from_dict(annotations),
        )


@dataclass
class CallToolResult:
    """Outcome of a tool call; ``is_error`` unset means success."""

    content: list[Content] = field(default_factory=list)
    is_error: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"content": [item.to_dict() for item in self.content]}
        _put(out, "isError", self.is_error)
        return out

    @classmethod
    def from_dict(cls, data: Any) -> CallToolResult:
        data = _mapping(data, "CallToolResult")
        content = _require(data, "content", "CallToolResult")
        if not isinstance(content, list):
            raise ToolError("CallToolResult: field `content` must be an array")
        is_error = data.get("isError")
        if is_error is not None and not isinstance(is_error, bool):
            raise ToolError("CallToolResult: field `isError` must be a boolean")
        return cls(content=[Content.from_dict(item) for item in content], is_error=is_error)


@dataclass
class Params:
    """Name of the tool to call and its arguments."""

    name: str = ""
    arguments: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        _put(out, "arguments", self.arguments)
        out["name"] = self.name
        return out

    @classmethod
    def from_dict(cls, data: Any) -> Params:
        data = _mapping(data, "Params")
        arguments = data.get("arguments")
        if arguments is not None and not isinstance(arguments, Mapping):
            raise ToolError("Params: field `arguments` must be an object")
        return cls(
            name=_string(_require(data, "name", "Params"), "name", "Params"),
            arguments=None if arguments is None else dict(arguments),
        )


@dataclass
class CallToolRequest:
    """A request to run one tool."""

    params: Params = field(default_factory=Params)
    method: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        _put(out, "method", self.method)
        out["params"] = self.params.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: Any) -> CallToolRequest:
        data = _mapping(data, "CallToolRequest")
        return cls(
            params=Params.from_dict(_require(data, "params", "CallToolRequest")),
            method=_optional_string(data, "method", "CallToolRequest"),
        )


@dataclass
class ToolDescription:
    """Name, description and input schema of a tool."""

    name: str = ""
    description: str = ""
    input_schema: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "inputSchema": self.input_schema,
            "name": self.name,
        }

    @classmethod
    def from_dict(cls, data: Any) -> ToolDescription:
        data = _mapping(data, "ToolDescription")
        schema = _require(data, "inputSchema", "ToolDescription")
        if not isinstance(schema, Mapping):
            raise ToolError("ToolDescription: field `inputSchema` must be an object")
        return cls(
            name=_string(_require(data, "name", "ToolDescription"), "name", "ToolDescription"),
            description=_string(
                _require(data, "description", "ToolDescription"), "description", "ToolDescription"
            ),
            input_schema=dict(schema),
        )


@dataclass
class ListToolsResult:
    """The tools a provider offers."""

    tools: list[ToolDescription] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"tools": [tool.to_dict() for tool in self.tools]}

    @classmethod
    def from_dict(cls, data: Any) -> ListToolsResult:
        data = _mapping(data, "ListToolsResult")
        tools = _require(data, "tools", "ListToolsResult")
        if not isinstance(tools, list):
            raise ToolError("ListToolsResult: field `tools` must be an array")
        return cls(tools=[ToolDescription.from_dict(tool) for tool in tools])


@dataclass
class BlobResourceContents:
    """Binary resource data, base64 encoded."""

    blob: str = ""
    uri: str = ""
    mime_type: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"blob": self.blob}
        _put(out, "mimeType", self.mime_type)
        out["uri"] = self.uri
        return out

    @classmethod
    def from_dict(cls, data: Any) -> BlobResourceContents:
        owner = "BlobResourceContents"
        data = _mapping(data, owner)
        return cls(
            blob=_string(_require(data, "blob", owner), "blob", owner),
            uri=_string(_require(data, "uri", owner), "uri", owner),
            mime_type=_optional_string(data, "mimeType", owner),
        )


@dataclass
class TextResourceContents:
    """Textual resource data."""

    text: str = ""
    uri: str = ""
    mime_type: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        _put(out, "mimeType", self.mime_type)
        out["text"] = self.text
        out["uri"] = self.uri
        return out

    @classmethod
    def from_dict(cls, data: Any) -> TextResourceContents:
        owner = "TextResourceContents"
        data = _mapping(data, owner)
        return cls(
            text=_string(_require(data, "text", owner), "text", owner),
            uri=_string(_require(data, "uri", owner), "uri", owner),
            mime_type=_optional_string(data, "mimeType", owner),
        )


def text_result(text: str, mime_type: str | None = None) -> CallToolResult:
    """A successful result holding one text item."""
    return CallToolResult(content=[Content(text=text, mime_type=mime_type)])


def error_result(text: str) -> CallToolResult:
    """A result flagged as an error, holding one text item."""
    return CallToolResult(content=[Content(text=text)], is_error=True)