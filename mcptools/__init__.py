"""Tools for MCP servers: web fetch, crates.io, Context7, arXiv and filesystem access."""

__version__ = "0.1.3"

__all__ = ["arxiv", "context7", "crates_io", "fetch", "fs", "protocol"]