[build-system]
requires = ["setuptools>=61.0"]
build-backend = "setuptools.build_meta"

[project]
name = "sapper"
version = "0.1.0"
description = "Classic minesweeper with a Tk interface, local statistics and a two-player TCP mode"
requires-python = ">=3.10"
dependencies = []
keywords = ["minesweeper", "sapper", "game", "puzzle", "tkinter"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: X11 Applications",
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
test = ["pytest"]

[project.scripts]
sapper = "sapper.app:main"

[tool.setuptools.packages.find]
include = ["sapper*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
