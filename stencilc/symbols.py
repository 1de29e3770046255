"""Symbol tables and the emission context used while generating IR."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

__all__ = ["FuncEntry", "SymbolTable", "CodeGenContext"]


@dataclass(frozen=True)
class FuncEntry:
    """A declared function and the number of parameters it takes."""

    name: str
    param_count: int


class SymbolTable:
    """Variables, functions and stencils visible in one scope.

    A later declaration of a name hides an earlier one.
    """

    def __init__(self) -> None:
        self._vars: Dict[str, str] = {}
        self._funcs: Dict[str, FuncEntry] = {}
        self._stencils: Set[str] = set()

    def add_var(self, name: str, llvm_name: str) -> None:
        """Bind a source variable name to the IR name that holds it."""
        self._vars[name] = llvm_name

    def lookup_var(self, name: str) -> Optional[str]:
        """The IR name bound to ``name``, or None."""
        return self._vars.get(name)

    def add_func(self, name: str, param_count: int) -> None:
        """Record a function declaration."""
        self._funcs[name] = FuncEntry(name, param_count)

    def lookup_func(self, name: str) -> Optional[FuncEntry]:
        """The declared function called ``name``, or None."""
        return self._funcs.get(name)

    def add_stencil(self, name: str) -> None:
        """Record a stencil declaration."""
        self._stencils.add(name)

    def lookup_stencil(self, name: str) -> Optional[str]:
        """``name`` if a stencil of that name is declared, otherwise None."""
        return name if name in self._stencils else None

    def child(self) -> "SymbolTable":
        """A new scope that sees the variables declared here so far, but no functions or stencils."""
        scope = SymbolTable()
        scope._vars = dict(self._vars)
        return scope


@dataclass
class CodeGenContext:
    """Counters for fresh names and the buffer that collects emitted lines."""

    label_counter: int = 0
    temp_counter: int = 0
    string_counter: int = 0
    current_function: Optional[str] = None
    in_stencil: bool = False
    _lines: List[str] = field(default_factory=list, init=False, repr=False)

    def emit(self, line: str = "") -> None:
        """Append one line of output."""
        self._lines.append(line)

    def new_temp(self) -> str:
        """A fresh SSA temporary name."""
        name = f"%tmp{self.temp_counter}"
        self.temp_counter += 1
        return name

    def new_label(self) -> str:
        """A fresh basic-block label."""
        name = f"label{self.label_counter}"
        self.label_counter += 1
        return name

    def new_string_const(self) -> str:
        """A fresh global string-constant name."""
        name = f"@.str{self.string_counter}"
        self.string_counter += 1
        return name

    def getvalue(self) -> str:
        """Everything emitted so far, one line per emit call."""
        return "".join(f"{line}\n" for line in self._lines)