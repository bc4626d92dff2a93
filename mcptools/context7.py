"""Tools that look up library documentation through the Context7 API."""

from __future__ import annotations

import json
import math
from typing import Any
from urllib.parse import quote

import requests

from mcptools.protocol import (
    CallToolRequest,
    CallToolResult,
    ListToolsResult,
    ToolDescription,
    error_result,
    text_result,
)

API_BASE_URL = "https://context7.com/api"
SOURCE_HEADER = ("X-Context7-Source", "mcp-server")

_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1
_FOLDERS_MARKER = "?folders="

_RESULTS_HEADER = (
    "Available Libraries (top matches):\n\n"
    "Each result includes information like:\n"
    "- Title: Library or package name\n"
    "- Context7-compatible library ID: Identifier (format: /org/repo)\n"
    "- Description: Short summary\n"
    "- Code Snippets: Number of available code examples (if available)\n"
    "- GitHub Stars: Popularity indicator (if available)\n\n"
    "For best results, select libraries based on name match, popularity (stars), "
    "snippet coverage, and relevance to your use case.\n\n---\n"
)


def _encode(text: str) -> str:
    return quote(text, safe="")


def _get(url: str) -> requests.Response:
    return requests.get(url, headers=dict([SOURCE_HEADER]))


def _body(response: requests.Response) -> str:
    return response.content.decode("utf-8", errors="replace")


def _is_success(status: int) -> bool:
    return 200 <= status < 300


def _str_or_na(item: Any, key: str) -> str:
    value = item.get(key) if isinstance(item, dict) else None
    return value if isinstance(value, str) else "N/A"


def _non_negative_int(item: Any, key: str) -> int | None:
    value = item.get(key) if isinstance(item, dict) else None
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    if _I64_MIN <= value <= _I64_MAX and value >= 0:
        return value
    return None


def _describe_library(item: Any) -> str:
    lines = [
        f"- Title: {_str_or_na(item, 'title')}",
        f"- Context7-compatible library ID: {_str_or_na(item, 'id')}",
        f"- Description: {_str_or_na(item, 'description')}",
    ]
    snippets = _non_negative_int(item, "totalSnippets")
    if snippets is not None:
        lines.append(f"- Code Snippets: {snippets}")
    stars = _non_negative_int(item, "stars")
    if stars is not None:
        lines.append(f"- GitHub Stars: {stars}")
    return "\n".join(lines)


def _summarise_search(document: Any) -> list[str]:
    if not isinstance(document, dict) or "results" not in document:
        return ["API response did not contain a 'results' field as expected."]
    results = document["results"]
    if not isinstance(results, list):
        return ["API response 'results' field was not an array as expected."]
    if not results:
        return ["No libraries found matching your query."]
    return [_describe_library(item) for item in results]


def _resolve_library_id(request: CallToolRequest) -> CallToolResult:
    args = request.params.arguments or {}
    library_name = args.get("library_name")
    if not isinstance(library_name, str):
        return error_result("Missing required parameter: library_name (or not a string)")

    url = f"{API_BASE_URL}/v1/search?query={_encode(library_name)}"
    try:
        response = _get(url)
    except requests.RequestException as exc:
        return error_result(f"HTTP request failed: {exc}")

    body = _body(response)
    if not _is_success(response.status_code):
        return error_result(f"API request failed with status {response.status_code}: {body}")
    try:
        document = json.loads(body)
    except json.JSONDecodeError as exc:
        return error_result(f"Failed to parse API response JSON: {exc}. Body: {body}")

    text = _RESULTS_HEADER + "\n\n".join(_summarise_search(document))
    return text_result(text, "text/markdown")


def _tokens_param(value: Any) -> str | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    number = float(value)
    if math.isnan(number):
        tokens = 0
    elif math.isinf(number):
        tokens = _I64_MAX if number > 0 else _I64_MIN
    else:
        tokens = max(_I64_MIN, min(_I64_MAX, int(number)))
    return f"tokens={tokens}"


def _get_library_docs(request: CallToolRequest) -> CallToolResult:
    args = request.params.arguments or {}
    original_id = args.get("context7_compatible_library_id")
    if not isinstance(original_id, str):
        return error_result(
            "Missing required parameter: context7_compatible_library_id (or not a string)"
        )

    id_for_path = original_id
    folders: str | None = None
    index = original_id.rfind(_FOLDERS_MARKER)
    if index != -1:
        id_for_path = original_id[:index]
        folders = original_id[index + len(_FOLDERS_MARKER):]

    query = [f"context7CompatibleLibraryID={_encode(original_id)}"]
    if folders:
        query.append(f"folders={_encode(folders)}")
    topic = args.get("topic")
    if isinstance(topic, str) and topic:
        query.append(f"topic={_encode(topic)}")
    tokens = _tokens_param(args.get("tokens"))
    if tokens is not None:
        query.append(tokens)

    segment = id_for_path[1:] if id_for_path.startswith("/") else id_for_path
    url = f"{API_BASE_URL}/v1/{segment}/?{'&'.join(query)}"

    try:
        response = _get(url)
    except requests.RequestException as exc:
        return error_result(f"HTTP request for docs failed: {exc}, URL: {url}")

    body = _body(response)
    if not _is_success(response.status_code):
        return error_result(
            f"API request for docs (URL: {url}) failed with status "
            f"{response.status_code}: {body}"
        )
    return text_result(body, "text/markdown")


def call(request: CallToolRequest) -> CallToolResult:
    """Run the tool named in the request."""
    handlers = {
        "c7_resolve_library_id": _resolve_library_id,
        "c7_get_library_docs": _get_library_docs,
    }
    handler = handlers.get(request.params.name)
    if handler is None:
        return error_result(f"Unknown tool: {request.params.name}")
    return handler(request)


def describe() -> ListToolsResult:
    """Describe the tools this module provides."""
    return ListToolsResult(
        tools=[
            ToolDescription(
                name="c7_resolve_library_id",
                description=(
                    "Resolves a package name to a Context7-compatible library ID and returns "
                    "a list of matching libraries. You MUST call this function before "
                    "'c7_get_library_docs' to obtain a valid Context7-compatible library ID. "
                    "When selecting the best match, consider: - Name similarity to the query "
                    "- Description relevance - Code Snippet count (documentation coverage) "
                    "- GitHub Stars (popularity) Return the selected library ID and explain "
                    "your choice. If there are multiple good matches, mention this but proceed "
                    "with the most relevant one."
                ),
                input_schema={
                    "type": "object",
                    "properties": {
                        "library_name": {
                            "type": "string",
                            "description": (
                                "Library name to search for and retrieve a "
                                "Context7-compatible library ID."
                            ),
                        },
                    },
                    "required": ["library_name"],
                },
            ),
            ToolDescription(
                name="c7_get_library_docs",
                description=(
                    "Fetches up-to-date documentation for a library. You must call "
                    "'c7_resolve_library_id' first to obtain the exact Context7-compatible "
                    "library ID required to use this tool."
                ),
                input_schema={
                    "type": "object",
                    "properties": {
                        "context7_compatible_library_id": {
                            "type": "string",
                            "description": (
                                "Exact Context7-compatible library ID (e.g., 'mongodb/docs', "
                                "'vercel/nextjs') retrieved from 'c7_resolve_library_id'."
                            ),
                        },
                        "topic": {
                            "type": "string",
                            "description": (
                                "Topic to focus documentation on (e.g., 'hooks', 'routing')."
                            ),
                        },
                        "tokens": {
                            "type": "integer",
                            "description": (
                                "Maximum number of tokens of documentation to retrieve "
                                "(default: 10000). Higher values provide more context but "
                                "consume more tokens."
                            ),
                        },
                    },
                    "required": ["context7_compatible_library_id"],
                },
            ),
        ]
    )