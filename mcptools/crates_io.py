"""Tools that query the crates.io registry."""

from __future__ import annotations

import json
from typing import Any

import requests

from mcptools.protocol import (
    CallToolRequest,
    CallToolResult,
    ListToolsResult,
    ToolDescription,
    ToolError,
    error_result,
    text_result,
)

API_URL = "https://crates.io/api/v1/crates"
USER_AGENT = "crates-io-tool/1.0"

_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1


def _as_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _as_i64(value: Any) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool) and _I64_MIN <= value <= _I64_MAX:
        return value
    return None


def _as_array(value: Any) -> list | None:
    return value if isinstance(value, list) else None


def _dumps(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def _crate_names(request: CallToolRequest) -> list[str] | None:
    names = (request.params.arguments or {}).get("crate_names")
    if not isinstance(names, str):
        return None
    return [name.strip() for name in names.split(",")]


def _fetch_crate(name: str) -> Any:
    try:
        response = requests.get(f"{API_URL}/{name}", headers={"User-Agent": USER_AGENT})
    except requests.RequestException as exc:
        raise ToolError(str(exc)) from exc
    body = response.content.decode("utf-8", errors="replace")
    try:
        return json.loads(body)
    except json.JSONDecodeError as exc:
        raise ToolError(str(exc)) from exc


def _crate_object(document: Any) -> dict | None:
    if isinstance(document, dict) and isinstance(document.get("crate"), dict):
        return document["crate"]
    return None


def _license(document: Any) -> str | None:
    versions = document.get("versions") if isinstance(document, dict) else None
    if isinstance(versions, list) and versions and isinstance(versions[0], dict):
        return _as_str(versions[0].get("license"))
    return None


def _latest_version(request: CallToolRequest) -> CallToolResult:
    names = _crate_names(request)
    if names is None:
        return error_result("Please provide crate names")
    versions: dict[str, str] = {}
    for name in names:
        crate = _crate_object(_fetch_crate(name))
        version = _as_str(crate.get("max_version")) if crate else None
        if version is not None:
            versions[name] = version
    if not versions:
        return error_result("Failed to get latest versions")
    return text_result(_dumps(versions), "text/plain")


def _crate_info(request: CallToolRequest) -> CallToolResult:
    names = _crate_names(request)
    if names is None:
        return error_result("Please provide crate names")
    results = []
    for name in names:
        document = _fetch_crate(name)
        crate = _crate_object(document)
        if crate is None:
            continue
        results.append(
            {
                "name": _as_str(crate.get("name")),
                "description": _as_str(crate.get("description")),
                "latest_version": _as_str(crate.get("max_version")),
                "downloads": _as_i64(crate.get("downloads")),
                "repository": _as_str(crate.get("repository")),
                "documentation": _as_str(crate.get("documentation")),
                "homepage": _as_str(crate.get("homepage")),
                "keywords": _as_array(crate.get("keywords")),
                "categories": _as_array(crate.get("categories")),
                "license": _license(document),
                "created_at": _as_str(crate.get("created_at")),
                "updated_at": _as_str(crate.get("updated_at")),
            }
        )
    if not results:
        return error_result("Failed to get crate information")
    return text_result(_dumps(results), "text/plain")


def call(request: CallToolRequest) -> CallToolResult:
    """Run the tool named in the request."""
    handlers = {
        "crates_io_latest_version": _latest_version,
        "crates_io_crate_info": _crate_info,
    }
    handler = handlers.get(request.params.name)
    if handler is None:
        return error_result(f"Unknown tool: {request.params.name}")
    return handler(request)


def _schema(description: str) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "crate_names": {"type": "string", "description": description},
        },
        "required": ["crate_names"],
    }


def describe() -> ListToolsResult:
    """Describe the tools this module provides."""
    return ListToolsResult(
        tools=[
            ToolDescription(
                name="crates_io_latest_version",
                description="Fetches the latest version of multiple crates from crates.io",
                input_schema=_schema(
                    "Comma-separated list of crate names to get the latest versions for"
                ),
            ),
            ToolDescription(
                name="crates_io_crate_info",
                description="Fetches detailed information about multiple crates from crates.io",
                input_schema=_schema("Comma-separated list of crate names to get information for"),
            ),
        ]
    )