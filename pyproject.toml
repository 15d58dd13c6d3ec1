[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tickengine"
version = "0.1.0"
description = "A small game-engine core: system lifecycles, an entity tree, fixed-timestep ticking, frame timers, input gestures and projections."
requires-python = ">=3.10"
dependencies = []
keywords = ["game", "engine", "entities", "systems", "fixed timestep", "input"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: First Person Shooters",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tickengine"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
