[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tpcbench"
version = "0.1.0"
description = "Run SQL query workloads from worker threads and report per-query latency statistics"
requires-python = ">=3.10"
keywords = [
    "benchmark",
    "database",
    "sql",
    "tidb",
    "ch-benchmark",
    "latency",
    "histogram",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database",
    "Topic :: System :: Benchmark",
]
dependencies = [
    "tabulate",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["tpcbench"]

[tool.hatch.build.targets.sdist]
include = ["tpcbench", "tests", "pyproject.toml"]

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
ignore_missing_imports = true
