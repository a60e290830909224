[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "roamutil"
version = "0.1.0"
description = "Low-level terminal utilities: pseudo-terminals, signal-aware select, locale checks, frozen millisecond timestamps and complete writes."
requires-python = ">=3.10"
dependencies = []
keywords = ["pty", "terminal", "select", "signals", "locale", "timestamp"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Terminals",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["roamutil"]

[tool.pytest.ini_options]
addopts = "-ra"
