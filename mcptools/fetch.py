"""Tool that fetches a URL and returns its contents as Markdown."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from html.parser import HTMLParser

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

USER_AGENT = "fetch-tool/1.0"
DEFAULT_SKIP_TAGS = ("script", "style")

_VOID_TAGS = {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "track", "wbr"}
_BLOCK_TAGS = {
    "address", "article", "aside", "body", "dd", "div", "dl", "dt", "figcaption", "figure",
    "footer", "form", "header", "html", "main", "nav", "section", "table", "tbody", "thead",
    "tfoot",
}
_HEADINGS = {f"h{level}": level for level in range(1, 7)}


@dataclass
class _Frame:
    tag: str
    attrs: dict[str, str] = field(default_factory=dict)
    parts: list[str] = field(default_factory=list)


class _MarkdownBuilder(HTMLParser):
    def __init__(self, skip_tags: Iterable[str]) -> None:
        super().__init__(convert_charrefs=True)
        self._skip = {tag.lower() for tag in skip_tags}
        self._skip_depth = 0
        self._frames = [_Frame("root")]
        self._lists: list[list] = []  # [ordered, next number]
        self._pre = 0

    # -- output helpers -------------------------------------------------
    def _emit(self, text: str) -> None:
        self._frames[-1].parts.append(text)

    def _last_char(self) -> str:
        for frame in reversed(self._frames):
            for part in reversed(frame.parts):
                if part:
                    return part[-1]
        return ""

    def _block_break(self) -> None:
        self._emit("\n\n")

    def _line_break(self) -> None:
        self._emit("\n")

    def _close_frame(self) -> None:
        frame = self._frames.pop()
        inner = "".join(frame.parts)
        if frame.tag == "a":
            text = inner.strip()
            href = frame.attrs.get("href")
            self._emit(f"[{text}]({href})" if href else text)
        elif frame.tag == "blockquote":
            lines = inner.strip().splitlines()
            quoted = "\n".join(f"> {line}" if line.strip() else ">" for line in lines)
            self._block_break()
            self._emit(quoted)
            self._block_break()
        elif frame.tag == "pre":
            self._pre -= 1
            self._block_break()
            self._emit("```\n" + inner.strip("\n") + "\n```")
            self._block_break()
        else:
            self._emit(inner)

    # -- parser callbacks -----------------------------------------------
    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag in self._skip:
            if tag not in _VOID_TAGS:
                self._skip_depth += 1
            return
        if self._skip_depth:
            return
        attributes = {name: value or "" for name, value in attrs}
        if tag in _HEADINGS:
            self._block_break()
            self._emit("#" * _HEADINGS[tag] + " ")
        elif tag == "p":
            if not self._lists:
                self._block_break()
        elif tag in ("ul", "ol"):
            if self._lists:
                self._line_break()
            else:
                self._block_break()
            start = attributes.get("start", "1")
            self._lists.append([tag == "ol", int(start) if start.isdigit() else 1])
        elif tag == "li":
            self._line_break()
            if self._lists:
                entry = self._lists[-1]
                indent = "  " * (len(self._lists) - 1)
                if entry[0]:
                    self._emit(f"{indent}{entry[1]}. ")
                    entry[1] += 1
                else:
                    self._emit(f"{indent}- ")
            else:
                self._emit("- ")
        elif tag in ("a", "blockquote"):
            self._frames.append(_Frame(tag, attributes))
        elif tag == "pre":
            self._pre += 1
            self._frames.append(_Frame(tag, attributes))
        elif tag in ("strong", "b"):
            self._emit("**")
        elif tag in ("em", "i"):
            self._emit("*")
        elif tag == "code":
            if not self._pre:
                self._emit("`")
        elif tag == "br":
            self._line_break()
        elif tag == "hr":
            self._block_break()
            self._emit("---")
            self._block_break()
        elif tag == "img":
            src = attributes.get("src")
            if src:
                self._emit(f"![{attributes.get('alt', '')}]({src})")
        elif tag == "tr":
            self._line_break()
        elif tag in ("td", "th"):
            if self._last_char() not in ("", "\n"):
                self._emit(" | ")
        elif tag in _BLOCK_TAGS:
            self._block_break()

    def handle_endtag(self, tag: str) -> None:
        if tag in self._skip:
            if tag not in _VOID_TAGS:
                self._skip_depth = max(0, self._skip_depth - 1)
            return
        if self._skip_depth:
            return
        if tag in _HEADINGS:
            self._block_break()
        elif tag == "p":
            if not self._lists:
                self._block_break()
        elif tag in ("ul", "ol"):
            if self._lists:
                self._lists.pop()
            if self._lists:
                self._line_break()
            else:
                self._block_break()
        elif tag in ("a", "blockquote", "pre"):
            if any(frame.tag == tag for frame in self._frames[1:]):
                while self._frames[-1].tag != tag:
                    self._close_frame()
                self._close_frame()
        elif tag in ("strong", "b"):
            self._emit("**")
        elif tag in ("em", "i"):
            self._emit("*")
        elif tag == "code":
            if not self._pre:
                self._emit("`")
        elif tag == "tr":
            self._line_break()
        elif tag in _BLOCK_TAGS:
            self._block_break()

    def handle_data(self, data: str) -> None:
        if self._skip_depth:
            return
        if self._pre:
            self._emit(data)
            return
        text = re.sub(r"\s+", " ", data)
        if text.startswith(" ") and self._last_char() in ("", " ", "\n"):
            text = text.lstrip(" ")
        if text:
            self._emit(text)

    def result(self) -> str:
        while len(self._frames) > 1:
            self._close_frame()
        text = "".join(self._frames[0].parts)
        text = re.sub(r"[ \t]+\n", "\n", text)
        text = re.sub(r"\n{3,}", "\n\n", text)
        return text.strip()


def html_to_markdown(html: str, skip_tags: Iterable[str] = DEFAULT_SKIP_TAGS) -> str:
    """Convert an HTML document to Markdown, dropping the contents of ``skip_tags``."""
    builder = _MarkdownBuilder(skip_tags)
    builder.feed(html)
    builder.close()
    return builder.result()


def _fetch(request: CallToolRequest) -> CallToolResult:
    args = request.params.arguments or {}
    url = args.get("url")
    if not isinstance(url, str):
        return error_result("Please provide a url")
    try:
        response = requests.get(url, headers={"User-Agent": USER_AGENT})
    except requests.RequestException as exc:
        raise ToolError(str(exc)) from exc
    html = response.content.decode("utf-8", errors="replace")
    try:
        markdown = html_to_markdown(html)
    except ValueError as exc:
        return error_result(f"Failed to convert HTML to markdown: {exc}")
    return text_result(markdown, "text/markdown")


def call(request: CallToolRequest) -> CallToolResult:
    """Run the tool named in the request."""
    if request.params.name == "fetch":
        return _fetch(request)
    return error_result(f"Unknown tool: {request.params.name}")


def describe() -> ListToolsResult:
    """Describe the tools this module provides."""
    return ListToolsResult(
        tools=[
            ToolDescription(
                name="fetch",
                description=(
                    "Enables to open and access arbitrary text URLs. Fetches the contents "
                    "of a URL and returns its contents converted to markdown"
                ),
                input_schema={
                    "type": "object",
                    "properties": {
                        "url": {"type": "string", "description": "The URL to fetch"},
                    },
                    "required": ["url"],
                },
            )
        ]
    )