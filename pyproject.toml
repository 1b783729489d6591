[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "minitensor"
version = "0.1.0"
description = "A small tensor computation graph with shape inference, graph optimisation, memory planning and reference CPU kernels"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "tensor",
    "computation graph",
    "shape inference",
    "graph optimization",
    "memory allocator",
    "deep learning",
]
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
packages = ["minitensor"]

[tool.hatch.build.targets.sdist]
include = [
    "minitensor",
    "tests",
    "pyproject.toml",
    "README.md",
]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
