[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mcp-datahub"
version = "0.1.0"
description = "DataHub metadata catalog client with multi-server connection management and query-engine extension points."
requires-python = ">=3.10"
keywords = ["datahub", "metadata", "catalog", "graphql", "lineage", "urn"]
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
    "Topic :: Database :: Front-Ends",
]
dependencies = [
    "httpx>=0.24",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "respx>=0.20",
    "hypothesis>=6.0",
]

[tool.hatch.build.targets.wheel]
packages = ["mcp_datahub"]

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
