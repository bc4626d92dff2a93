# mcptools

A collection of tools in the shape used by MCP (Model Context Protocol)
servers. Each tool module exposes two functions:

- `describe()` returns a `ListToolsResult` naming the tools the module
  offers, each with a JSON schema for its arguments.
- `call(request)` takes a `CallToolRequest` and returns a `CallToolResult`.
  A tool name the module does not know gives an error result
  (`Unknown tool: ...`, or `Unknown operation: ...` in `mcptools.fs`).

The modules are:

| Module                | Tools                                                    |
|-----------------------|----------------------------------------------------------|
| `mcptools.fetch`      | `fetch`                                                  |
| `mcptools.crates_io`  | `crates_io_latest_version`, `crates_io_crate_info`       |
| `mcptools.context7`   | `c7_resolve_library_id`, `c7_get_library_docs`           |
| `mcptools.arxiv`      | `arxiv_search`, `arxiv_download_pdf`                     |
| `mcptools.fs`         | `read_file`, `read_multiple_files`, `write_file`, `edit_file`, `create_dir`, `list_dir`, `move_file`, `search_files`, `get_file_info` |

The message types (`CallToolRequest`, `Params`, `CallToolResult`,
`Content`, `ContentType`, `Role`, `TextAnnotation`, `ToolDescription`,
`ListToolsResult`, `BlobResourceContents`, `TextResourceContents`) live in
`mcptools.protocol`. Each dataclass has `to_dict()` and `from_dict()` for
moving to and from the JSON wire form; `from_dict()` raises `ToolError`
on a missing or mistyped field. `text_result(text, mime_type=None)` and
`error_result(text)` build single-item results.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Usage

```python
from mcptools import crates_io
from mcptools.protocol import CallToolRequest

for tool in crates_io.describe().tools:
    print(tool.name, "-", tool.description)

request = CallToolRequest.from_dict({
    "params": {
        "name": "crates_io_latest_version",
        "arguments": {"crate_names": "serde, tokio"},
    }
})
result = crates_io.call(request)
print(result.to_dict())
```

## The tools

- `fetch` downloads a URL and converts the HTML to Markdown, leaving out
  the contents of `script` and `style` elements. The converter is
  available on its own as `mcptools.fetch.html_to_markdown(html, skip_tags)`.
- `crates_io_latest_version` takes a comma-separated `crate_names` string
  and returns a JSON object mapping each crate to its latest version.
  `crates_io_crate_info` returns a JSON array of details per crate
  (description, downloads, repository, license and more).
- `c7_resolve_library_id` searches the Context7 API for a `library_name`
  and returns a Markdown summary of the matches. `c7_get_library_docs`
  fetches Markdown documentation for a `context7_compatible_library_id`,
  optionally narrowed by `topic` and limited by `tokens`.
- `arxiv_search` queries arXiv for `query` (at most `max_results`,
  default 10, newest first) and returns the papers as a JSON array.
  `mcptools.arxiv.parse_feed(xml)` turns an Atom feed into `Paper`
  objects. `arxiv_download_pdf` saves the PDF of `paper_id` as
  `<save_path>/<id>.pdf`, with `save_path` defaulting to `/tmp`.
- The `mcptools.fs` tools act on the local filesystem with the
  permissions of the running process. `list_dir` and `get_file_info`
  return JSON with sizes, types and times in whole seconds since the
  epoch; `search_files` recursively lists files whose names contain
  `pattern`.

```python
from mcptools import fs
from mcptools.protocol import CallToolRequest

request = CallToolRequest.from_dict({
    "params": {"name": "list_dir", "arguments": {"path": "."}}
})
print(fs.call(request).content[0].text)
```

## Errors

A tool that cannot do its job because its arguments are missing, or
because an upstream service or the filesystem answered badly, usually
returns a result with `is_error` set to `True` and a text explaining why.
Some failures raise `mcptools.protocol.ToolError` instead:

- network errors in `fetch`, `crates_io` and `arxiv`, and a crates.io
  response that is not JSON;
- a missing `query` or `paper_id` in the arXiv tools, a feed that cannot
  be parsed, an empty PDF, or a PDF that cannot be written;
- `edit_file` on a file that cannot be opened, and an entry that cannot
  be inspected during `list_dir`.

## What this package does not do

It provides the tools and their message types only. It does not run an
MCP server, speak any transport (stdio, SSE or HTTP), or load tools from
a configuration; there is no command-line program. Wiring `describe()`
and `call()` into a server is left to the application that uses it.