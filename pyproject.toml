[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "coldatoms"
version = "0.1.0"
description = "Entity-component simulation of cold atoms: integration, gravity, collisions and atom sources"
requires-python = ">=3.10"
keywords = ["physics", "cold atoms", "simulation", "monte carlo", "dsmc", "atom sources"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Physics",
]
dependencies = [
    "numpy",
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["coldatoms"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
