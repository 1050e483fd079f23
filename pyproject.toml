[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "accsim"
version = "0.1.0"
description = "Adaptive cruise control controller and longitudinal vehicle simulation"
requires-python = ">=3.10"
dependencies = []
keywords = ["adaptive cruise control", "pid", "vehicle dynamics", "simulation", "controls"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
accsim = "accsim.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["accsim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
