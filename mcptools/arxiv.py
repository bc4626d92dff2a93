"""Tools that search arXiv and download paper PDFs."""

from __future__ import annotations

import json
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from urllib.parse import quote

import requests

from mcptools.protocol import (
    CallToolRequest,
    CallToolResult,
    Content,
    ListToolsResult,
    Role,
    TextAnnotation,
    ToolDescription,
    ToolError,
    error_result,
)

SEARCH_URL = "http://export.arxiv.org/api/query"
PDF_URL = "https://arxiv.org/pdf"
SEARCH_USER_AGENT = "mcptools/1.0"
DOWNLOAD_USER_AGENT = "Mozilla/5.0 (compatible; mcptools/1.0)"
DEFAULT_MAX_RESULTS = 10
DEFAULT_SAVE_PATH = "/tmp"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_U64_MAX = 2**64 - 1


def _format_datetime(moment: datetime) -> str:
    moment = moment.astimezone(timezone.utc)
    base = moment.strftime("%Y-%m-%dT%H:%M:%S")
    micro = moment.microsecond
    if micro == 0:
        fraction = ""
    elif micro % 1000 == 0:
        fraction = f".{micro // 1000:03d}"
    else:
        fraction = f".{micro:06d}"
    return f"{base}{fraction}Z"


@dataclass
class Paper:
    """One paper found by a search."""

    paper_id: str = ""
    title: str = ""
    authors: list[str] = field(default_factory=list)
    abstract_text: str = ""
    url: str = ""
    pdf_url: str = ""
    published_date: datetime = _EPOCH
    updated_date: datetime = _EPOCH
    source: str = "arxiv"
    categories: list[str] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)
    doi: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "paper_id": self.paper_id,
            "title": self.title,
            "authors": list(self.authors),
            "abstract_text": self.abstract_text,
            "url": self.url,
            "pdf_url": self.pdf_url,
            "published_date": _format_datetime(self.published_date),
            "updated_date": _format_datetime(self.updated_date),
            "source": self.source,
            "categories": list(self.categories),
            "keywords": list(self.keywords),
            "doi": self.doi,
        }


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _children(element: ET.Element, name: str) -> list[ET.Element]:
    return [child for child in element if _local(child.tag) == name]


def _child(element: ET.Element, name: str) -> ET.Element | None:
    found = _children(element, name)
    return found[0] if found else None


def _text(element: ET.Element | None) -> str | None:
    if element is None:
        return None
    return "".join(element.itertext())


def _parse_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        moment = datetime.fromisoformat(text)
    except ValueError:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _paper_from_entry(entry: ET.Element) -> Paper:
    entry_id = _text(_child(entry, "id")) or ""
    links = _children(entry, "link")
    url = next((link.get("href", "") for link in links if link.get("rel") == "alternate"), "")
    pdf_url = next(
        (link.get("href", "") for link in links if link.get("type") == "application/pdf"), ""
    )
    return Paper(
        paper_id=entry_id.split("/abs/")[-1],
        title=_text(_child(entry, "title")) or "",
        authors=[_text(_child(author, "name")) or "" for author in _children(entry, "author")],
        abstract_text=_text(_child(entry, "content")) or "",
        url=url,
        pdf_url=pdf_url,
        published_date=_parse_datetime(_text(_child(entry, "published"))) or _EPOCH,
        updated_date=_parse_datetime(_text(_child(entry, "updated"))) or _EPOCH,
        categories=[cat.get("term", "") for cat in _children(entry, "category")],
    )


def parse_feed(xml: str | bytes) -> list[Paper]:
    """Parse an arXiv Atom feed into papers; raise ToolError if it is not a feed."""
    try:
        root = ET.fromstring(xml)
    except ET.ParseError as exc:
        raise ToolError(f"Failed to parse arXiv feed: {exc}") from exc
    if _local(root.tag) != "feed":
        raise ToolError(f"Failed to parse arXiv feed: unexpected root element <{_local(root.tag)}>")
    return [_paper_from_entry(entry) for entry in _children(root, "entry")]


def _max_results(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= _U64_MAX:
        return value
    return DEFAULT_MAX_RESULTS


def _search(request: CallToolRequest) -> CallToolResult:
    args = request.params.arguments or {}
    query = args.get("query")
    if not isinstance(query, str):
        raise ToolError("query parameter is required")
    max_results = _max_results(args.get("max_results"))
    url = (
        f"{SEARCH_URL}?search_query={quote(query, safe='')}&max_results={max_results}"
        "&sortBy=submittedDate&sortOrder=descending"
    )
    try:
        response = requests.get(url, headers={"User-Agent": SEARCH_USER_AGENT})
    except requests.RequestException as exc:
        raise ToolError(str(exc)) from exc
    xml = response.content.decode("utf-8", errors="replace")
    papers = parse_feed(xml.encode("utf-8"))
    text = json.dumps(
        [paper.to_dict() for paper in papers], separators=(",", ":"), ensure_ascii=False
    )
    return CallToolResult(content=[Content(text=text, mime_type="application/json")])


def _download_pdf(request: CallToolRequest) -> CallToolResult:
    args = request.params.arguments or {}
    paper_id = args.get("paper_id")
    if not isinstance(paper_id, str):
        raise ToolError("paper_id parameter is required")
    save_path = args.get("save_path")
    if not isinstance(save_path, str):
        save_path = DEFAULT_SAVE_PATH

    clean_id = paper_id.split("/")[-1] if "/" in paper_id else paper_id
    try:
        response = requests.get(
            f"{PDF_URL}/{clean_id}",
            headers={"User-Agent": DOWNLOAD_USER_AGENT, "Accept": "application/pdf"},
        )
    except requests.RequestException as exc:
        raise ToolError(f"HTTP request failed: {exc}") from exc

    pdf_data = response.content
    if not pdf_data:
        raise ToolError("Received empty PDF data from arXiv")

    file_path = f"{save_path.rstrip('/')}/{clean_id}.pdf"
    try:
        Path(file_path).write_bytes(pdf_data)
    except OSError as exc:
        raise ToolError(f"Failed to write PDF to {file_path}: {exc}") from exc

    return CallToolResult(
        content=[
            Content(
                text=f"PDF saved to: {file_path}",
                annotations=TextAnnotation(audience=[Role.USER, Role.ASSISTANT], priority=1.0),
            )
        ]
    )


def call(request: CallToolRequest) -> CallToolResult:
    """Run the tool named in the request."""
    handlers = {
        "arxiv_search": _search,
        "arxiv_download_pdf": _download_pdf,
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
                name="arxiv_search",
                description="Search for papers on arXiv",
                input_schema={
                    "type": "object",
                    "properties": {
                        "query": {"type": "string", "description": "The search query"},
                        "max_results": {
                            "type": "integer",
                            "description": "Maximum number of results to return (default: 10)",
                        },
                    },
                    "required": ["query"],
                },
            ),
            ToolDescription(
                name="arxiv_download_pdf",
                description="Download a paper's PDF from arXiv",
                input_schema={
                    "type": "object",
                    "properties": {
                        "paper_id": {"type": "string", "description": "The arXiv paper ID"},
                        "save_path": {
                            "type": "string",
                            "description": "Path to save the PDF file (default: /tmp)",
                        },
                    },
                    "required": ["paper_id"],
                },
            ),
        ]
    )