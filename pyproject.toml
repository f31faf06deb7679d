[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "apexoptics"
version = "0.1.0"
description = "N-dimensional polynomial optics models for spectrometer track reconstruction"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["optics", "polynomial", "spectrometer", "least-squares", "nuclear physics"]
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

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["apexoptics"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
