[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sinused"
version = "0.1.0"
description = "Hide a string of bits in a sinusoidal graph image and read it back."
requires-python = ">=3.10"
dependencies = [
    "pillow",
]
keywords = ["steganography", "sine", "bitmap", "png", "jpeg", "tga", "hdr", "image-writer"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics",
    "Topic :: Multimedia :: Graphics :: Graphics Conversion",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
sinus-ed = "sinused.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["sinused"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
