"""Tools that read, write and inspect files on the local filesystem."""

from __future__ import annotations

import json
import logging
import os
import stat
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from mcptools.protocol import (
    CallToolRequest,
    CallToolResult,
    ListToolsResult,
    ToolDescription,
    ToolError,
    error_result,
    text_result,
)

logger = logging.getLogger(__name__)

_NS_PER_SECOND = 1_000_000_000


def _dumps(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def _json_result(value: Any) -> CallToolResult:
    return text_result(_dumps(value), "application/json")


def _string_args(request: CallToolRequest, *keys: str) -> tuple[str, ...] | None:
    args = request.params.arguments or {}
    values = tuple(args.get(key) for key in keys)
    if all(isinstance(value, str) for value in values):
        return values
    return None


def _epoch_seconds(nanoseconds: int) -> int:
    if nanoseconds < 0:
        raise ToolError("second time provided was later than self")
    return nanoseconds // _NS_PER_SECOND


def _created_ns(info: os.stat_result) -> int:
    """Creation time where the platform reports it, otherwise status-change time."""
    birth_ns = getattr(info, "st_birthtime_ns", None)
    if birth_ns is not None:
        return birth_ns
    birth = getattr(info, "st_birthtime", None)
    if birth is not None:
        return int(birth * _NS_PER_SECOND)
    return info.st_ctime_ns


def _read_text(path: str) -> str:
    return Path(path).read_bytes().decode("utf-8")


def _read_file(request: CallToolRequest) -> CallToolResult:
    found = _string_args(request, "path")
    if found is None:
        return error_result("Please provide a path")
    (path,) = found
    try:
        content = _read_text(path)
    except (OSError, ValueError) as exc:
        return error_result(f"Failed to read file: {exc}")
    return text_result(content, "text/plain")


def _read_multiple_files(request: CallToolRequest) -> CallToolResult:
    paths = (request.params.arguments or {}).get("paths")
    if not isinstance(paths, list):
        return error_result("Please provide an array of paths")
    results = []
    for path in paths:
        if not isinstance(path, str):
            continue
        try:
            results.append({"path": path, "content": _read_text(path), "error": None})
        except (OSError, ValueError) as exc:
            results.append({"path": path, "content": None, "error": str(exc)})
    return _json_result(results)


def _write_file(request: CallToolRequest) -> CallToolResult:
    found = _string_args(request, "path", "content")
    if found is None:
        return error_result("Please provide path and content")
    path, content = found
    try:
        Path(path).write_bytes(content.encode("utf-8"))
    except OSError as exc:
        return error_result(f"Failed to write file: {exc}")
    return text_result("File written successfully")


def _edit_file(request: CallToolRequest) -> CallToolResult:
    found = _string_args(request, "path", "content")
    if found is None:
        return error_result("Please provide path and content")
    path, content = found
    try:
        descriptor = os.open(path, os.O_WRONLY | os.O_TRUNC | getattr(os, "O_BINARY", 0))
        with os.fdopen(descriptor, "wb") as handle:
            handle.write(content.encode("utf-8"))
    except OSError as exc:
        raise ToolError(str(exc)) from exc
    return text_result("File edited successfully")


def _create_dir(request: CallToolRequest) -> CallToolResult:
    found = _string_args(request, "path")
    if found is None:
        return error_result("Please provide a path")
    (path,) = found
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as exc:
        return error_result(f"Failed to create directory: {exc}")
    return text_result("Directory created successfully")


def _entry_info(entry: os.DirEntry) -> dict[str, Any]:
    try:
        info = entry.stat(follow_symlinks=False)
    except OSError as exc:
        raise ToolError(str(exc)) from exc
    return {
        "name": entry.name,
        "path": entry.path,
        "is_file": stat.S_ISREG(info.st_mode),
        "is_dir": stat.S_ISDIR(info.st_mode),
        "size": info.st_size,
        "modified": _epoch_seconds(info.st_mtime_ns),
    }


def _list_dir(request: CallToolRequest) -> CallToolResult:
    found = _string_args(request, "path")
    if found is None:
        return error_result("Please provide a path")
    (path,) = found
    try:
        with os.scandir(path) as entries:
            listing = list(entries)
    except OSError as exc:
        return error_result(f"Failed to list directory: {exc}")
    return _json_result([_entry_info(entry) for entry in listing])


def _move_file(request: CallToolRequest) -> CallToolResult:
    found = _string_args(request, "from", "to")
    if found is None:
        return error_result("Please provide from and to paths")
    source, target = found
    try:
        os.replace(source, target)
    except OSError as exc:
        return error_result(f"Failed to move file: {exc}")
    return text_result("File moved successfully")


def _matching_files(directory: str, pattern: str) -> Iterator[str]:
    with os.scandir(directory) as entries:
        listing = list(entries)
    for entry in listing:
        if os.path.isdir(entry.path):
            yield from _matching_files(entry.path, pattern)
        elif pattern in entry.name:
            yield entry.path


def _search_files(request: CallToolRequest) -> CallToolResult:
    found = _string_args(request, "directory", "pattern")
    if found is None:
        return error_result("Please provide directory and pattern")
    directory, pattern = found
    try:
        matches = list(_matching_files(directory, pattern))
    except OSError as exc:
        return error_result(f"Failed to search files: {exc}")
    return _json_result(matches)


def _get_file_info(request: CallToolRequest) -> CallToolResult:
    found = _string_args(request, "path")
    if found is None:
        return error_result("Please provide a path")
    (path,) = found
    try:
        info = os.stat(path)
    except OSError as exc:
        return error_result(f"Failed to get file info: {exc}")
    return _json_result(
        {
            "size": info.st_size,
            "is_file": stat.S_ISREG(info.st_mode),
            "is_dir": stat.S_ISDIR(info.st_mode),
            "modified": _epoch_seconds(info.st_mtime_ns),
            "created": _epoch_seconds(_created_ns(info)),
            "accessed": _epoch_seconds(info.st_atime_ns),
        }
    )


_HANDLERS = {
    "read_file": _read_file,
    "read_multiple_files": _read_multiple_files,
    "write_file": _write_file,
    "edit_file": _edit_file,
    "create_dir": _create_dir,
    "list_dir": _list_dir,
    "move_file": _move_file,
    "search_files": _search_files,
    "get_file_info": _get_file_info,
}


def call(request: CallToolRequest) -> CallToolResult:
    """Run the filesystem operation named in the request."""
    logger.info("call: %r", request)
    handler = _HANDLERS.get(request.params.name)
    if handler is None:
        return error_result(f"Unknown operation: {request.params.name}")
    return handler(request)


def _schema(properties: dict[str, dict[str, Any]], required: list[str]) -> dict[str, Any]:
    return {"type": "object", "properties": properties, "required": required}


def _string_prop(description: str) -> dict[str, Any]:
    return {"type": "string", "description": description}


def describe() -> ListToolsResult:
    """Describe the tools this module provides."""
    return ListToolsResult(
        tools=[
            ToolDescription(
                name="read_file",
                description="Read the contents of a file",
                input_schema=_schema({"path": _string_prop("Path to the file to read")}, ["path"]),
            ),
            ToolDescription(
                name="read_multiple_files",
                description="Read contents of multiple files",
                input_schema=_schema(
                    {
                        "paths": {
                            "type": "array",
                            "items": {"type": "string"},
                            "description": "Array of file paths to read",
                        }
                    },
                    ["paths"],
                ),
            ),
            ToolDescription(
                name="write_file",
                description="Write content to a file",
                input_schema=_schema(
                    {
                        "path": _string_prop("Path where to write the file"),
                        "content": _string_prop("Content to write to the file"),
                    },
                    ["path", "content"],
                ),
            ),
            ToolDescription(
                name="edit_file",
                description="Edit an existing file's content",
                input_schema=_schema(
                    {
                        "path": _string_prop("Path to the file to edit"),
                        "content": _string_prop("New content for the file"),
                    },
                    ["path", "content"],
                ),
            ),
            ToolDescription(
                name="create_dir",
                description="Create a new directory",
                input_schema=_schema(
                    {"path": _string_prop("Path where to create the directory")}, ["path"]
                ),
            ),
            ToolDescription(
                name="list_dir",
                description="List contents of a directory",
                input_schema=_schema(
                    {"path": _string_prop("Path to the directory to list")}, ["path"]
                ),
            ),
            ToolDescription(
                name="move_file",
                description="Move a file from one location to another",
                input_schema=_schema(
                    {
                        "from": _string_prop("Source path of the file"),
                        "to": _string_prop("Destination path for the file"),
                    },
                    ["from", "to"],
                ),
            ),
            ToolDescription(
                name="search_files",
                description="Search for files matching a pattern in a directory",
                input_schema=_schema(
                    {
                        "directory": _string_prop("Directory to search in"),
                        "pattern": _string_prop("Pattern to match against filenames"),
                    },
                    ["directory", "pattern"],
                ),
            ),
            ToolDescription(
                name="get_file_info",
                description="Get information about a file or directory",
                input_schema=_schema(
                    {"path": _string_prop("Path to get information about")}, ["path"]
                ),
            ),
        ]
    )