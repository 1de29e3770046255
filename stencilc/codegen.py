"""Whole-program IR generation: globals, functions, stencils and apply loops."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, replace
from typing import Deque, Iterator, Optional

from stencilc.ast import (
    Apply,
    Coordinate,
    FuncDec,
    LocationDirective,
    Node,
    NodeList,
    NodeType,
    Number,
    SizeDirective,
    Stencil,
    VarDec,
)
from stencilc.expressions import generate_statement
from stencilc.symbols import CodeGenContext, SymbolTable

__all__ = [
    "ApplySettings",
    "emit_runtime_functions",
    "generate_global_decls",
    "emit_main_function",
    "collect_apply_settings",
    "generate_apply_statements",
    "generate_code",
    "compile_program",
]

DEFAULT_APPLY_SIZE = 50
_MAX_DIRECTIVE_QUEUE = 9

_MODULE_HEADER = (
    "; ModuleID = 'stencil'",
    'source_filename = "stencil"',
    'target datalayout = "e-m:o-i64:64-i128:128-n32:64-S128"',
    'target triple = "arm64-apple-macosx14.0.0"',
    "",
)

_DIRECTIVE_LISTS = (NodeType.DIRECTIVE_LIST, NodeType.STATEMENT_LIST)


@dataclass(frozen=True)
class ApplySettings:
    """Where a stencil is applied and how large the square it covers is."""

    x: int = 0
    y: int = 0
    size: int = DEFAULT_APPLY_SIZE


def emit_runtime_functions(ctx: CodeGenContext) -> None:
    """Declare the canvas functions the generated code calls."""
    ctx.emit("; External functions")
    ctx.emit("declare void @paint_pixel(i32, i32, i32)")
    ctx.emit("declare i32 @get_canvas_width()")
    ctx.emit("declare i32 @get_canvas_height()")
    ctx.emit("")


def _parameters(params: Optional[Node]) -> Iterator[Optional[Node]]:
    while params is not None:
        if params.node_type is NodeType.PARAMETER_LIST:
            yield params.head
            params = params.tail
        else:
            yield params
            return


def _global_var(node: VarDec, ctx: CodeGenContext, table: SymbolTable) -> None:
    initial = node.value.value if isinstance(node.value, Number) else 0
    ctx.emit(f"@{node.name} = global i32 {initial}")
    table.add_var(node.name, f"@{node.name}")


def _function(node: FuncDec, ctx: CodeGenContext, table: SymbolTable) -> None:
    params = list(_parameters(node.params))
    table.add_func(node.name, len(params))

    local = table.child()
    pieces = []
    for param in params:
        if isinstance(param, VarDec):
            pieces.append(f"i32 %{param.name}")
            local.add_var(param.name, f"%{param.name}")
        else:
            pieces.append("")
    ctx.emit(f"define i32 @{node.name}({', '.join(pieces)}) {{")
    ctx.emit("entry:")

    ctx.current_function = node.name
    try:
        generate_statement(node.body, ctx, local)
    finally:
        ctx.current_function = None
    ctx.emit("  ret i32 0")
    ctx.emit("}")
    ctx.emit("")


def _stencil(node: Stencil, ctx: CodeGenContext, table: SymbolTable) -> None:
    table.add_stencil(node.name)
    ctx.emit(
        f"define void @stencil_{node.name}"
        "(i32 %x_val, i32 %y_val, i32 %offset_x, i32 %offset_y) {"
    )
    ctx.emit("entry:")
    for slot in ("x", "y", "ox", "oy"):
        ctx.emit(f"  %{slot} = alloca i32")
    ctx.emit("  store i32 %x_val, i32* %x")
    ctx.emit("  store i32 %y_val, i32* %y")
    ctx.emit("  store i32 %offset_x, i32* %ox")
    ctx.emit("  store i32 %offset_y, i32* %oy")

    scope = table.child()
    ctx.in_stencil = True
    try:
        generate_statement(node.body, ctx, scope)
    finally:
        ctx.in_stencil = False
    ctx.emit("  ret void")
    ctx.emit("}")
    ctx.emit("")


def generate_global_decls(node: Optional[Node], ctx: CodeGenContext, table: SymbolTable) -> None:
    """Emit global variables, functions and stencil functions found at top level."""
    match node:
        case NodeList(kind=NodeType.STATEMENT_LIST):
            generate_global_decls(node.head, ctx, table)
            generate_global_decls(node.tail, ctx, table)
        case VarDec():
            _global_var(node, ctx, table)
        case FuncDec():
            _function(node, ctx, table)
        case Stencil():
            _stencil(node, ctx, table)
        case _:
            pass


def emit_main_function(ctx: CodeGenContext, table: SymbolTable) -> None:
    """Emit an empty ``main`` that returns 0."""
    ctx.emit("define i32 @main() {")
    ctx.emit("entry:")
    ctx.emit("  ; Initialize canvas")
    ctx.emit("  ret i32 0")
    ctx.emit("}")


def collect_apply_settings(directives: Optional[Node]) -> ApplySettings:
    """Read location and size directives, breadth first, into apply settings.

    Only constant numbers are taken; at most nine nodes are ever queued.
    """
    settings = ApplySettings()
    queue: Deque[Node] = deque()
    queued = 0

    def push(item: Optional[Node]) -> None:
        nonlocal queued
        if item is not None and queued < _MAX_DIRECTIVE_QUEUE:
            queue.append(item)
            queued += 1

    if directives is not None:
        queue.append(directives)
        queued = 1

    while queue:
        current = queue.popleft()
        if isinstance(current, LocationDirective):
            coord = current.coordinate
            if isinstance(coord, Coordinate):
                if isinstance(coord.x, Number):
                    settings = replace(settings, x=coord.x.value)
                if isinstance(coord.y, Number):
                    settings = replace(settings, y=coord.y.value)
        elif isinstance(current, SizeDirective):
            if isinstance(current.size, Number):
                settings = replace(settings, size=current.size.value)
        elif isinstance(current, NodeList) and current.kind in _DIRECTIVE_LISTS:
            push(current.head)
            push(current.tail)
    return settings


def _apply(node: Apply, ctx: CodeGenContext, table: SymbolTable) -> None:
    if table.lookup_stencil(node.name) is None:
        return
    settings = collect_apply_settings(node.directives)

    y_counter, x_counter = ctx.new_temp(), ctx.new_temp()
    y_cond, x_cond = ctx.new_temp(), ctx.new_temp()
    y_next, x_next = ctx.new_temp(), ctx.new_temp()

    y_loop, y_body, y_exit = ctx.new_label(), ctx.new_label(), ctx.new_label()
    x_loop, x_body, x_exit = ctx.new_label(), ctx.new_label(), ctx.new_label()

    ctx.emit(f"  ; Apply stencil {node.name}")
    ctx.emit(f"  br label %{y_loop}")
    ctx.emit(f"{y_loop}:")
    ctx.emit(f"  {y_counter} = phi i32 [0, %entry], [{y_next}, %{x_exit}]")
    ctx.emit(f"  {y_cond} = icmp slt i32 {y_counter}, {settings.size}")
    ctx.emit(f"  br i1 {y_cond}, label %{y_body}, label %{y_exit}")

    ctx.emit(f"{y_body}:")
    ctx.emit(f"  br label %{x_loop}")
    ctx.emit(f"{x_loop}:")
    ctx.emit(f"  {x_counter} = phi i32 [0, %{y_body}], [{x_next}, %{x_body}]")
    ctx.emit(f"  {x_cond} = icmp slt i32 {x_counter}, {settings.size}")
    ctx.emit(f"  br i1 {x_cond}, label %{x_body}, label %{x_exit}")

    ctx.emit(f"{x_body}:")
    ctx.emit(
        f"  call void @stencil_{node.name}(i32 {x_counter}, i32 {y_counter}, "
        f"i32 {settings.x}, i32 {settings.y})"
    )
    ctx.emit(f"  {x_next} = add i32 {x_counter}, 1")
    ctx.emit(f"  br label %{x_loop}")

    ctx.emit(f"{x_exit}:")
    ctx.emit(f"  {y_next} = add i32 {y_counter}, 1")
    ctx.emit(f"  br label %{y_loop}")

    ctx.emit(f"{y_exit}:")


def generate_apply_statements(node: Optional[Node], ctx: CodeGenContext, table: SymbolTable) -> None:
    """Emit a loop nest for each top-level apply of a declared stencil."""
    match node:
        case NodeList(kind=NodeType.STATEMENT_LIST):
            generate_apply_statements(node.head, ctx, table)
            generate_apply_statements(node.tail, ctx, table)
        case Apply():
            _apply(node, ctx, table)
        case _:
            pass


def generate_code(ast: Optional[Node], ctx: CodeGenContext, table: SymbolTable) -> None:
    """Emit a complete module for the program into ``ctx``."""
    for line in _MODULE_HEADER:
        ctx.emit(line)
    emit_runtime_functions(ctx)
    generate_global_decls(ast, ctx, table)

    ctx.emit("define i32 @llvm_main() {")
    ctx.emit("entry:")
    ctx.temp_counter = 0
    generate_apply_statements(ast, ctx, table)
    ctx.emit("  ret i32 0")
    ctx.emit("}")


def compile_program(ast: Optional[Node]) -> str:
    """Compile a program tree to IR text."""
    ctx = CodeGenContext()
    generate_code(ast, ctx, SymbolTable())
    return ctx.getvalue()