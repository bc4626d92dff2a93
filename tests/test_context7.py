import json
import re
from urllib.parse import parse_qs, urlsplit

import pytest
import requests
import responses

from mcptools import context7
from mcptools.protocol import CallToolRequest, Params

ANY_API_URL = re.compile(r"https://context7\.com/api/.*")


@pytest.fixture
def api():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def _request(name, **arguments):
    return CallToolRequest(params=Params(name=name, arguments=arguments))


def _text(result):
    assert len(result.content) == 1
    return result.content[0].text


def test_describe_lists_both_tools():
    tools = context7.describe().tools
    assert [tool.name for tool in tools] == ["c7_resolve_library_id", "c7_get_library_docs"]
    assert tools[0].input_schema["required"] == ["library_name"]
    assert tools[1].input_schema["required"] == ["context7_compatible_library_id"]


def test_unknown_tool_is_error():
    result = context7.call(_request("nope"))
    assert result.is_error is True
    assert _text(result) == "Unknown tool: nope"


def test_resolve_requires_string_name(api):
    result = context7.call(_request("c7_resolve_library_id", library_name=3))
    assert result.is_error is True
    assert _text(result) == "Missing required parameter: library_name (or not a string)"
    assert len(api.calls) == 0


def test_resolve_formats_results_and_sends_header(api):
    payload = {
        "results": [
            {
                "title": "React",
                "id": "/facebook/react",
                "description": "UI",
                "totalSnippets": 5,
                "stars": 10,
            }
        ]
    }
    api.add(responses.GET, ANY_API_URL, json=payload)
    result = context7.call(_request("c7_resolve_library_id", library_name="react hooks"))

    assert result.is_error is None
    assert result.content[0].mime_type == "text/markdown"
    text = _text(result)
    assert text.startswith("Available Libraries (top matches):")
    assert text.endswith(
        "---\n- Title: React\n- Context7-compatible library ID: /facebook/react\n"
        "- Description: UI\n- Code Snippets: 5\n- GitHub Stars: 10"
    )
    sent = api.calls[0].request
    assert sent.headers["X-Context7-Source"] == "mcp-server"
    parts = urlsplit(sent.url)
    assert parts.path == "/api/v1/search"
    assert parse_qs(parts.query) == {"query": ["react hooks"]}


def test_resolve_missing_fields_and_negative_counts(api):
    payload = {"results": [{"stars": -1, "totalSnippets": 2.5}, {"title": "B"}]}
    api.add(responses.GET, ANY_API_URL, json=payload)
    text = _text(context7.call(_request("c7_resolve_library_id", library_name="x")))
    body = text.split("---\n", 1)[1]
    first, second = body.split("\n\n")
    assert first == (
        "- Title: N/A\n- Context7-compatible library ID: N/A\n- Description: N/A"
    )
    assert second.startswith("- Title: B\n")
    assert "Code Snippets" not in body
    assert "GitHub Stars" not in body


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"results": []}, "No libraries found matching your query."),
        ({"results": "oops"}, "API response 'results' field was not an array as expected."),
        ({"other": 1}, "API response did not contain a 'results' field as expected."),
        ([1, 2], "API response did not contain a 'results' field as expected."),
    ],
)
def test_resolve_unexpected_shapes(api, payload, message):
    api.add(responses.GET, ANY_API_URL, body=json.dumps(payload))
    result = context7.call(_request("c7_resolve_library_id", library_name="x"))
    assert result.is_error is None
    assert _text(result).endswith("---\n" + message)


def test_resolve_non_success_status(api):
    api.add(responses.GET, ANY_API_URL, status=500, body="down")
    result = context7.call(_request("c7_resolve_library_id", library_name="x"))
    assert result.is_error is True
    assert _text(result) == "API request failed with status 500: down"


def test_resolve_invalid_json(api):
    api.add(responses.GET, ANY_API_URL, body="not json")
    result = context7.call(_request("c7_resolve_library_id", library_name="x"))
    assert result.is_error is True
    text = _text(result)
    assert text.startswith("Failed to parse API response JSON: ")
    assert text.endswith(". Body: not json")


def test_resolve_connection_error(api):
    api.add(responses.GET, ANY_API_URL, body=requests.ConnectionError("boom"))
    result = context7.call(_request("c7_resolve_library_id", library_name="x"))
    assert result.is_error is True
    assert _text(result) == "HTTP request failed: boom"


def test_docs_requires_string_id(api):
    result = context7.call(_request("c7_get_library_docs", topic="hooks"))
    assert result.is_error is True
    assert _text(result) == (
        "Missing required parameter: context7_compatible_library_id (or not a string)"
    )
    assert len(api.calls) == 0


def test_docs_returns_body_as_markdown(api):
    api.add(responses.GET, ANY_API_URL, body="# Docs")
    result = context7.call(
        _request("c7_get_library_docs", context7_compatible_library_id="/mongodb/docs")
    )
    assert result.is_error is None
    assert result.content[0].mime_type == "text/markdown"
    assert _text(result) == "# Docs"
    parts = urlsplit(api.calls[0].request.url)
    assert parts.path == "/api/v1/mongodb/docs/"
    assert parse_qs(parts.query) == {"context7CompatibleLibraryID": ["/mongodb/docs"]}


def test_docs_splits_folders_and_adds_topic_and_tokens(api):
    api.add(responses.GET, ANY_API_URL, body="ok")
    library_id = "/vercel/nextjs?folders=docs"
    result = context7.call(
        _request(
            "c7_get_library_docs",
            context7_compatible_library_id=library_id,
            topic="routing",
            tokens=1500.7,
        )
    )
    assert result.is_error is None
    assert _text(result) == "ok"
    parts = urlsplit(api.calls[0].request.url)
    assert parts.path == "/api/v1/vercel/nextjs/"
    assert parse_qs(parts.query) == {
        "context7CompatibleLibraryID": [library_id],
        "folders": ["docs"],
        "topic": ["routing"],
        "tokens": ["1500"],
    }


def test_docs_skips_empty_topic_and_folders_and_non_number_tokens(api):
    api.add(responses.GET, ANY_API_URL, body="ok")
    result = context7.call(
        _request(
            "c7_get_library_docs",
            context7_compatible_library_id="org/repo?folders=",
            topic="",
            tokens="100",
        )
    )
    assert result.is_error is None
    assert _text(result) == "ok"
    parts = urlsplit(api.calls[0].request.url)
    assert parts.path == "/api/v1/org/repo/"
    assert parse_qs(parts.query) == {"context7CompatibleLibraryID": ["org/repo?folders="]}


def test_docs_non_success_status_mentions_url(api):
    api.add(responses.GET, ANY_API_URL, status=404, body="missing")
    result = context7.call(
        _request("c7_get_library_docs", context7_compatible_library_id="org/repo", tokens=10)
    )
    assert result.is_error is True
    text = _text(result)
    assert text.startswith("API request for docs (URL: https://context7.com/api/v1/org/repo/?")
    assert "tokens=10" in text
    assert text.endswith("failed with status 404: missing")


def test_docs_connection_error(api):
    api.add(responses.GET, ANY_API_URL, body=requests.ConnectionError("boom"))
    result = context7.call(
        _request("c7_get_library_docs", context7_compatible_library_id="org/repo")
    )
    assert result.is_error is True
    text = _text(result)
    assert text.startswith("HTTP request for docs failed: boom, URL: ")
    assert text.endswith("/v1/org/repo/?context7CompatibleLibraryID=org%2Frepo")