[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kinfer"
version = "0.1.0"
description = "A small neural-network inference runtime: in-memory computation graphs, a layer registry, stored zip archives and float32 math approximations"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["inference", "neural-network", "runtime", "graph", "deep-learning"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["kinfer"]

[tool.pytest.ini_options]
addopts = "-ra"
