[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "choochoo"
version = "0.1.0"
description = "A small message-passing microkernel with generator tasks, user-space servers and a support library, in pure Python"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "kernel",
    "microkernel",
    "scheduler",
    "message-passing",
    "send-receive-reply",
    "slab-allocator",
    "model-railway",
    "simulation",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Operating System Kernels",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["choochoo"]

[tool.hatch.build.targets.sdist]
include = ["choochoo", "tests", "pyproject.toml"]

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
