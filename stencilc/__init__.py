"""Stencil painting language: syntax trees, LLVM IR generation, and an ANSI terminal canvas."""

__version__ = "0.1.0"
__all__ = ["ast", "runtime", "symbols", "expressions", "codegen"]