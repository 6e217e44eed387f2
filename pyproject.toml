[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ldlt"
version = "0.1.0"
description = "Dense LDLT factorization with diagonal pivoting, solves, rank-one updates and row insertion/deletion"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["ldlt", "factorization", "linear algebra", "rank-one update", "symmetric matrix"]
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
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
]

[tool.hatch.build.targets.wheel]
packages = ["ldlt"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
