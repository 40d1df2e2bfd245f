[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nanotetris"
version = "0.1.0"
description = "A small falling-blocks puzzle game on top of a tiny 2D engine"
requires-python = ">=3.10"
dependencies = [
    "pygame",
]
keywords = ["tetris", "game", "puzzle", "pygame", "2d-engine"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Puzzle Games",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
nanotetris = "nanotetris.main:main"

[tool.hatch.build.targets.wheel]
packages = ["nanotetris"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
