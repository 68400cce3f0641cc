[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cubscape"
version = "0.1.0"
description = "Scene-file parser and textured raycasting engine for .cub maze maps"
requires-python = ">=3.10"
keywords = ["raycasting", "raycaster", "maze", "game", "cub", "pygame"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: First Person Shooters",
]
dependencies = [
    "numpy",
    "pillow",
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["cubscape"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
