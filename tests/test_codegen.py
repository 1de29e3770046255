import re

import pytest

from stencilc.ast import (
    Apply,
    BinaryOp,
    Coordinate,
    FuncDec,
    Identifier,
    LocationDirective,
    NodeList,
    NodeType,
    Number,
    OpType,
    Paint,
    Return,
    SizeDirective,
    Stencil,
    VarDec,
)
from stencilc.codegen import (
    ApplySettings,
    collect_apply_settings,
    emit_main_function,
    emit_runtime_functions,
    generate_apply_statements,
    generate_code,
    generate_global_decls,
    compile_program,
)
from stencilc.symbols import CodeGenContext, FuncEntry, SymbolTable


def _stmts(*items):
    node = items[-1]
    for item in reversed(items[:-1]):
        node = NodeList(item, node)
    return node


def _directives(*items):
    node = items[-1]
    for item in reversed(items[:-1]):
        node = NodeList(item, node, kind=NodeType.DIRECTIVE_LIST)
    return node


def _paint_stencil(name="box"):
    return Stencil(name, Paint(Number(2)))


def test_module_header_and_runtime_declarations():
    text = compile_program(None)
    assert text.startswith("; ModuleID = 'stencil'\n")
    assert 'target triple = "arm64-apple-macosx14.0.0"' in text
    assert "declare void @paint_pixel(i32, i32, i32)\n" in text
    assert text.endswith("define i32 @llvm_main() {\nentry:\n  ret i32 0\n}\n")


def test_emit_runtime_functions():
    ctx = CodeGenContext()
    emit_runtime_functions(ctx)
    lines = ctx.getvalue().splitlines()
    assert lines[0] == "; External functions"
    assert "declare i32 @get_canvas_width()" in lines
    assert "declare i32 @get_canvas_height()" in lines
    assert lines[-1] == ""


def test_global_variables():
    ctx = CodeGenContext()
    table = SymbolTable()
    generate_global_decls(_stmts(VarDec("g", Number(7)), VarDec("h", Identifier("g"))), ctx, table)
    lines = ctx.getvalue().splitlines()
    assert "@g = global i32 7" in lines
    assert "@h = global i32 0" in lines
    assert table.lookup_var("g") == "@g"
    assert table.lookup_var("h") == "@h"


def test_function_with_parameters():
    params = NodeList(VarDec("a"), VarDec("b"), kind=NodeType.PARAMETER_LIST)
    body = Return(BinaryOp(OpType.PLUS, Identifier("a"), Identifier("b")))
    ctx = CodeGenContext()
    table = SymbolTable()
    generate_global_decls(FuncDec("add", params, body), ctx, table)
    text = ctx.getvalue()
    assert "define i32 @add(i32 %a, i32 %b) {\nentry:\n" in text
    assert table.lookup_func("add") == FuncEntry("add", 2)
    assert table.lookup_var("a") is None
    assert ctx.current_function is None
    assert text.endswith("  ret i32 0\n}\n\n")


def test_function_with_single_parameter():
    table = SymbolTable()
    ctx = CodeGenContext()
    generate_global_decls(FuncDec("neg", VarDec("n"), Return(Identifier("n"))), ctx, table)
    assert table.lookup_func("neg") == FuncEntry("neg", 1)
    assert "define i32 @neg(i32 %n) {" in ctx.getvalue()


def test_stencil_declaration():
    ctx = CodeGenContext()
    table = SymbolTable()
    generate_global_decls(_paint_stencil("box"), ctx, table)
    text = ctx.getvalue()
    assert "define void @stencil_box(i32 %x_val, i32 %y_val, i32 %offset_x, i32 %offset_y) {" in text
    assert "call void @paint_pixel(" in text
    assert table.lookup_stencil("box") == "box"
    assert ctx.in_stencil is False
    assert text.endswith("  ret void\n}\n\n")


def test_emit_main_function():
    ctx = CodeGenContext()
    emit_main_function(ctx, SymbolTable())
    assert ctx.getvalue().splitlines() == [
        "define i32 @main() {",
        "entry:",
        "  ; Initialize canvas",
        "  ret i32 0",
        "}",
    ]


def test_default_apply_settings():
    assert collect_apply_settings(None) == ApplySettings(0, 0, 50)


def test_apply_settings_from_directives():
    directives = _directives(
        LocationDirective(Coordinate(Number(3), Number(4))), SizeDirective(Number(10))
    )
    assert collect_apply_settings(directives) == ApplySettings(x=3, y=4, size=10)


def test_non_constant_directives_are_ignored():
    directives = _directives(
        LocationDirective(Coordinate(Identifier("a"), Number(4))), SizeDirective(Identifier("s"))
    )
    assert collect_apply_settings(directives) == ApplySettings(x=0, y=4, size=50)


def test_later_directive_wins():
    directives = _directives(SizeDirective(Number(5)), SizeDirective(Number(9)))
    assert collect_apply_settings(directives).size == 9


def test_directive_queue_is_bounded():
    directives = _directives(*(SizeDirective(Number(n)) for n in range(1, 7)))
    assert collect_apply_settings(directives).size == 4


def test_apply_of_unknown_stencil_emits_nothing():
    ctx = CodeGenContext()
    generate_apply_statements(Apply("missing"), ctx, SymbolTable())
    assert ctx.getvalue() == ""


def test_apply_loop_nest():
    program = _stmts(
        _paint_stencil("box"),
        Apply("box", _directives(LocationDirective(Coordinate(Number(3), Number(4))), SizeDirective(Number(10)))),
    )
    text = compile_program(program)
    main = text[text.index("define i32 @llvm_main()"):]
    assert "  ; Apply stencil box\n" in main
    assert "%tmp0 = phi i32 [0, %entry]" in main
    assert "icmp slt i32 %tmp0, 10" in main
    assert re.search(r"call void @stencil_box\(i32 %tmp\d+, i32 %tmp0, i32 3, i32 4\)", main)


def test_apply_inside_nested_statement_list():
    table = SymbolTable()
    table.add_stencil("dot")
    ctx = CodeGenContext()
    generate_apply_statements(_stmts(VarDec("v"), _stmts(Apply("dot"), Apply("dot"))), ctx, table)
    assert ctx.getvalue().count("; Apply stencil dot") == 2


def test_labels_are_unique():
    program = _stmts(_paint_stencil("a"), _paint_stencil("b"), Apply("a"), Apply("b"))
    ctx = CodeGenContext()
    generate_code(program, ctx, SymbolTable())
    labels = re.findall(r"^(label\d+):$", ctx.getvalue(), flags=re.MULTILINE)
    assert len(labels) == 12
    assert len(set(labels)) == len(labels)


@pytest.mark.parametrize("size", [1, 25, 200])
def test_size_appears_in_both_loop_bounds(size):
    program = _stmts(_paint_stencil("s"), Apply("s", SizeDirective(Number(size))))
    text = compile_program(program)
    assert len(re.findall(rf"icmp slt i32 %tmp\d+, {size}\n", text)) == 2