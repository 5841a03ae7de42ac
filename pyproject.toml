[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "epsonraster"
version = "0.1.0"
description = "Raster line pipeline for printer output: scaling, watermark blending, mirroring, page reversal and fetching"
requires-python = ">=3.10"
dependencies = []
keywords = ["printing", "raster", "watermark", "bitmap", "pipeline"]
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
    "Topic :: Printing",
    "Topic :: Multimedia :: Graphics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["epsonraster"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
