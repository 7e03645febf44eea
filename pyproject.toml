[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "simgroup"
version = "0.1.0"
description = "Group visually similar images by perceptual hash, including images inside zip archives"
requires-python = ">=3.10"
keywords = ["image", "phash", "perceptual hash", "duplicates", "similarity", "grouping"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics",
    "Topic :: Utilities",
]
dependencies = [
    "pillow",
    "numpy",
    "scipy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
simgroup = "simgroup.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["simgroup"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
