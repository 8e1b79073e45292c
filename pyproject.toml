[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "strikepad"
version = "0.1.0"
description = "Desktop trainer for a networked boxing strike pad with seven lamp zones"
requires-python = ">=3.10"
dependencies = []
keywords = ["boxing", "training", "strike pad", "reaction time", "tkinter"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: X11 Applications",
    "Environment :: Win32 (MS Windows)",
    "Intended Audience :: End Users/Desktop",
    "Natural Language :: Russian",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Simulation",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
strikepad = "strikepad.gui:main"

[tool.hatch.build.targets.wheel]
packages = ["strikepad"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
