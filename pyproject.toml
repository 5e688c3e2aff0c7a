[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "exprvm"
version = "0.1.0"
description = "A small stack-based virtual machine for evaluating business-rule bytecode over JSON-like data"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "expression",
    "virtual-machine",
    "bytecode",
    "interpreter",
    "rules",
    "decimal",
    "json",
]
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
    "Topic :: Software Development :: Interpreters",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
]

[tool.hatch.build.targets.wheel]
packages = ["exprvm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
