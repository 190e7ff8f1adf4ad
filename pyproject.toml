[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tondilisten"
version = "0.1.1"
description = "Building blocks for a blockchain listener service: event configuration, client settings, stored chain models, query helpers and response envelopes."
requires-python = ">=3.10"
keywords = ["blockchain", "listener", "wrpc", "grpc", "events", "websocket", "explorer"]
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
    "Topic :: Internet",
]
dependencies = [
    "sqlalchemy>=2.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.4",
    "pytest-asyncio>=0.23",
]

[tool.hatch.build.targets.wheel]
packages = ["tondilisten"]

[tool.hatch.build.targets.sdist]
include = ["tondilisten", "tests", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
