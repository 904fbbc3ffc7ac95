[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mcptrigger"
version = "0.1.0"
description = "An HTTP server that routes MCP JSON-RPC requests to in-process tool components"
requires-python = ">=3.10"
dependencies = []
keywords = ["mcp", "json-rpc", "model-context-protocol", "http", "server", "tools"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
mcptrigger = "mcptrigger.server:main"

[tool.hatch.build.targets.wheel]
packages = ["mcptrigger"]

[tool.pytest.ini_options]
addopts = "-ra"
