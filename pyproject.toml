[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lsd"
version = "1.1.5"
description = "Building blocks for a colourful ls: command-line options, YAML configuration, colour themes and grid/tree layout."
requires-python = ">=3.10"
keywords = ["ls", "directory listing", "terminal", "colors", "LS_COLORS", "grid"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Filesystems",
    "Topic :: Utilities",
]
dependencies = [
    "pyyaml>=6.0",
    "wcwidth>=0.2.6",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[tool.hatch.build.targets.wheel]
packages = ["lsd"]

[tool.hatch.build.targets.sdist]
include = ["lsd", "tests", "pyproject.toml", "README.md"]

[tool.pytest.ini_options]
testpaths = ["tests"]
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
