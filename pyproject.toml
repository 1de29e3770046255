[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "stencilc"
version = "0.1.0"
description = "Code generator from stencil painting-language syntax trees to LLVM IR, with a terminal canvas runtime"
requires-python = ">=3.10"
dependencies = []
keywords = ["compiler", "llvm", "stencil", "code generation", "ansi", "canvas"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Compilers",
    "Topic :: Software Development :: Code Generators",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["stencilc"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
