[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pediasync"
version = "0.1.0"
description = "Building blocks for keeping multi-cluster resource stores in sync: pressure queues, rate limiters, resource sync status tracking and request helpers."
requires-python = ">=3.10"
dependencies = []
keywords = ["kubernetes", "multi-cluster", "synchronization", "informer", "queue", "wsgi"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Distributed Computing",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Middleware",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pediasync"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
