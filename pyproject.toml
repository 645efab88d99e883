[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pgcatalog"
version = "0.1.0"
description = "Queries for a data-management catalog stored in PostgreSQL: packages, files, organizations, users, teams and storage accounting."
requires-python = ">=3.10"
dependencies = []
keywords = ["postgresql", "catalog", "packages", "datasets", "queries", "dbapi"]
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

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pgcatalog"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
