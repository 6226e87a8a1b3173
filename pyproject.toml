[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "uoart"
version = "0.1.0"
description = "Convert Ultima Online artwork records (art, gumps, textures, lights, hues, animations) to and from bitmaps"
requires-python = ">=3.10"
dependencies = []
keywords = ["ultima online", "bmp", "bitmap", "art", "gump", "hue", "animation", "conversion"]
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
    "Topic :: Multimedia :: Graphics :: Graphics Conversion",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["uoart"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
