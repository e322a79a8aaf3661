[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mcgate"
version = "0.1.0"
description = "Building blocks of a Minecraft Java edition proxy: plugin channels, events, server and player registry, BungeeCord channel handling and player info forwarding."
requires-python = ">=3.10"
dependencies = []
keywords = ["minecraft", "proxy", "bungeecord", "velocity", "plugin-messaging"]
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
    "Topic :: Internet :: Proxy Servers",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mcgate"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
