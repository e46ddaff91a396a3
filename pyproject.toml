[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "irproto"
version = "3.3.0"
description = "Encoders and decoders for infrared remote-control protocols (NEC, Apple, Onkyo, RC5, RC6, Samsung, Sony) on mark/space timing data"
requires-python = ">=3.10"
dependencies = []
keywords = ["infrared", "ir", "remote-control", "nec", "rc5", "rc6", "samsung", "sony", "protocol"]
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
    "Topic :: Software Development :: Embedded Systems",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["irproto"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
