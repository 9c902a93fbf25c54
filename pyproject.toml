[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "memscan"
version = "0.1.0"
description = "Search the memory of running Linux processes for values and narrow down the hits"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "memory",
    "scanner",
    "procfs",
    "debugging",
    "process",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Debuggers",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
memscan = "memscan.app:main"
random-memory = "memscan.randmem:main"

[tool.hatch.build.targets.wheel]
packages = ["memscan"]

[tool.hatch.build.targets.sdist]
include = ["memscan", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
