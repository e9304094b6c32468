[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bitcep"
version = "0.1.0"
description = "Complex event processing over bit-parallel event sequences"
requires-python = ">=3.10"
dependencies = []
keywords = ["complex event processing", "cep", "bit-parallel", "pattern matching", "event streams"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Information Analysis",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
bitcep = "bitcep.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["bitcep"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
