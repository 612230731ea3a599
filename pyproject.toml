[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "moondeck"
version = "1.0.0"
description = "Host-side services for streaming games from a PC: settings, pairing, HTTPS server, heartbeat and stream helper"
requires-python = ">=3.10"
keywords = ["streaming", "steam", "sunshine", "heartbeat", "pairing"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX :: Linux",
    "Operating System :: Microsoft :: Windows",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
]
dependencies = [
    "filelock",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
moondeck-stream = "moondeck.stream:main"

[tool.hatch.build.targets.wheel]
packages = ["moondeck"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
