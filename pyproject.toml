[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mcptools"
version = "0.1.3"
description = "Tool implementations for MCP servers: web fetch, crates.io lookups, Context7 docs, arXiv search and filesystem access"
requires-python = ">=3.10"
dependencies = [
    "requests",
]
keywords = ["mcp", "ai", "tools", "arxiv", "crates.io", "filesystem", "markdown"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Internet :: WWW/HTTP",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["mcptools"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
