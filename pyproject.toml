[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "eventring"
version = "0.3.3"
description = "Ring buffers and reference-counted slot pools for sized event systems"
requires-python = ">=3.10"
dependencies = []
keywords = ["ringbuffer", "memory-pool", "events", "reference-counting"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["eventring"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
