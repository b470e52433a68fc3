[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sabledb"
version = "0.1.0"
description = "Building blocks of a Redis-compatible key-value server: request parsing, RESP replies, value metadata encoding and replication messages"
requires-python = ">=3.10"
dependencies = []
keywords = ["redis", "resp", "key-value", "database", "replication"]
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
    "Topic :: Database :: Database Engines/Servers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sabledb"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
