[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "plugrpc"
version = "0.1.0"
description = "Configuration, block-number parsing, an event bus and JSON-RPC result types for an EVM-compatible chain node"
requires-python = ">=3.10"
dependencies = [
    "pycryptodome",
]
keywords = ["json-rpc", "evm", "ethereum", "bech32", "pubsub", "blockchain"]
classifiers = [
    "Development Status :: 4 - Beta",
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
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["plugrpc"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
