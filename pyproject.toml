[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "astrolib"
version = "0.1.0"
description = "An Asteroids-style arcade game engine for a small monochrome display"
requires-python = ">=3.10"
dependencies = []
keywords = ["asteroids", "arcade", "game", "monochrome", "framebuffer"]
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
    "Topic :: Games/Entertainment :: Arcade",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["astrolib"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
