[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dymolw"
version = "1.0.0"
description = "Command-stream generation for DYMO LabelWriter label printers from 1-bit raster lines"
requires-python = ">=3.10"
dependencies = []
keywords = ["dymo", "labelwriter", "label printer", "raster", "printing"]
classifiers = [
    "Development Status :: 5 - Production/Stable",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Printing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["dymolw"]

[tool.hatch.build.targets.sdist]
include = ["dymolw", "tests", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
