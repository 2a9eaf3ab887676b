[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bplistkit"
version = "0.1.0"
description = "Read and write binary property lists, with a small object model for plist trees"
requires-python = ">=3.10"
dependencies = []
keywords = ["plist", "bplist", "binary plist", "property list", "serialization"]
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
    "Topic :: File Formats",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
bplistkit-demo = "bplistkit.demo:main"

[tool.hatch.build.targets.wheel]
packages = ["bplistkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
