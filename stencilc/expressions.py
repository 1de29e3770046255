"""IR generation for expressions and statements."""

from __future__ import annotations

from itertools import islice
from typing import Iterator, Optional

from stencilc.ast import (
    Assignment,
    BinaryOp,
    Block,
    FuncCall,
    Identifier,
    If,
    Node,
    NodeList,
    NodeType,
    Number,
    OpType,
    Paint,
    Return,
    UnaryOp,
    VarDec,
)
from stencilc.symbols import CodeGenContext, SymbolTable

__all__ = ["generate_expression", "generate_statement"]

_MAX_CALL_ARGS = 100

_ARITHMETIC = {
    OpType.PLUS: "add",
    OpType.MINUS: "sub",
    OpType.TIMES: "mul",
    OpType.DIVIDE: "sdiv",
}
_COMPARISON = {
    OpType.LESS: "slt",
    OpType.GREATER: "sgt",
    OpType.EQUALS: "eq",
}
_LOGICAL = {
    OpType.AND: "and",
    OpType.OR: "or",
}


def _value(node: Optional[Node], ctx: CodeGenContext, table: SymbolTable) -> str:
    result = generate_expression(node, ctx, table)
    if result is None:
        found = "nothing" if node is None else node.node_type.name
        raise ValueError(f"expected an expression, found {found}")
    return result


def _call_arguments(args: Optional[Node]) -> Iterator[Optional[Node]]:
    while args is not None:
        if args.node_type is NodeType.EXPRESSION_LIST:
            yield args.head
            args = args.tail
        else:
            yield args
            return


def _identifier(node: Identifier, ctx: CodeGenContext, table: SymbolTable) -> str:
    var_name = table.lookup_var(node.name)
    if var_name is not None:
        if not ctx.in_stencil:
            return var_name
        temp = ctx.new_temp()
        ctx.emit(f"  {temp} = load i32, i32* {var_name}")
        return temp
    if ctx.in_stencil and node.name in ("x", "y"):
        temp = ctx.new_temp()
        ctx.emit(f"  {temp} = load i32, i32* %{node.name}")
        return temp
    return f"%{node.name}"


def _binary(node: BinaryOp, ctx: CodeGenContext, table: SymbolTable) -> str:
    left = _value(node.left, ctx, table)
    right = _value(node.right, ctx, table)
    temp = ctx.new_temp()
    op = node.op
    if op in _ARITHMETIC:
        ctx.emit(f"  {temp} = {_ARITHMETIC[op]} i32 {left}, {right}")
    elif op in _COMPARISON:
        cmp_temp = ctx.new_temp()
        ctx.emit(f"  {cmp_temp} = icmp {_COMPARISON[op]} i32 {left}, {right}")
        ctx.emit(f"  {temp} = zext i1 {cmp_temp} to i32")
    elif op in _LOGICAL:
        left_bool = ctx.new_temp()
        right_bool = ctx.new_temp()
        combined = ctx.new_temp()
        ctx.emit(f"  {left_bool} = icmp ne i32 {left}, 0")
        ctx.emit(f"  {right_bool} = icmp ne i32 {right}, 0")
        ctx.emit(f"  {combined} = {_LOGICAL[op]} i1 {left_bool}, {right_bool}")
        ctx.emit(f"  {temp} = zext i1 {combined} to i32")
    else:
        raise ValueError(f"{op.symbol()} is not a binary operator")
    return temp


def _unary(node: UnaryOp, ctx: CodeGenContext, table: SymbolTable) -> str:
    operand = _value(node.operand, ctx, table)
    temp = ctx.new_temp()
    if node.op is OpType.MINUS:
        ctx.emit(f"  {temp} = sub i32 0, {operand}")
    elif node.op is OpType.PLUS:
        return operand
    elif node.op is OpType.NOT:
        cmp_temp = ctx.new_temp()
        ctx.emit(f"  {cmp_temp} = icmp eq i32 {operand}, 0")
        ctx.emit(f"  {temp} = zext i1 {cmp_temp} to i32")
    else:
        raise ValueError(f"{node.op.symbol()} is not a unary operator")
    return temp


def _call(node: FuncCall, ctx: CodeGenContext, table: SymbolTable) -> str:
    temp = ctx.new_temp()
    args = [
        _value(arg, ctx, table)
        for arg in islice(_call_arguments(node.args), _MAX_CALL_ARGS)
    ]
    arg_text = ", ".join(f"i32 {arg}" for arg in args)
    ctx.emit(f"  {temp} = call i32 @{node.name}({arg_text})")
    return temp


def generate_expression(
    node: Optional[Node], ctx: CodeGenContext, table: SymbolTable
) -> Optional[str]:
    """Emit the code for an expression and return the IR value holding its result.

    Returns None for a missing node or one that is not an expression.
    """
    match node:
        case Number(value=value):
            return str(value)
        case Identifier():
            return _identifier(node, ctx, table)
        case BinaryOp():
            return _binary(node, ctx, table)
        case UnaryOp():
            return _unary(node, ctx, table)
        case FuncCall():
            return _call(node, ctx, table)
        case _:
            return None


def _if(node: If, ctx: CodeGenContext, table: SymbolTable) -> None:
    cond = _value(node.condition, ctx, table)
    cond_bool = ctx.new_temp()
    then_label = ctx.new_label()
    else_label = ctx.new_label()
    end_label = ctx.new_label()
    has_else = node.else_stmt is not None

    ctx.emit(f"  {cond_bool} = icmp ne i32 {cond}, 0")
    false_target = else_label if has_else else end_label
    ctx.emit(f"  br i1 {cond_bool}, label %{then_label}, label %{false_target}")

    ctx.emit(f"{then_label}:")
    generate_statement(node.then_stmt, ctx, table)
    ctx.emit(f"  br label %{end_label}")

    if has_else:
        ctx.emit(f"{else_label}:")
        generate_statement(node.else_stmt, ctx, table)
        ctx.emit(f"  br label %{end_label}")

    ctx.emit(f"{end_label}:")


def _paint(node: Paint, ctx: CodeGenContext, table: SymbolTable) -> None:
    if not ctx.in_stencil:
        return
    color = _value(node.value, ctx, table)
    rel_x = ctx.new_temp()
    rel_y = ctx.new_temp()
    offset_x = ctx.new_temp()
    offset_y = ctx.new_temp()
    abs_x = ctx.new_temp()
    abs_y = ctx.new_temp()

    ctx.emit(f"  {rel_x} = load i32, i32* %x")
    ctx.emit(f"  {rel_y} = load i32, i32* %y")
    ctx.emit(f"  {offset_x} = load i32, i32* %ox")
    ctx.emit(f"  {offset_y} = load i32, i32* %oy")
    ctx.emit(f"  {abs_x} = add i32 {rel_x}, {offset_x}")
    ctx.emit(f"  {abs_y} = add i32 {rel_y}, {offset_y}")
    ctx.emit(f"  call void @paint_pixel(i32 {abs_x}, i32 {abs_y}, i32 {color})")
    ctx.emit("  ret void")


def generate_statement(node: Optional[Node], ctx: CodeGenContext, table: SymbolTable) -> None:
    """Emit the code for a statement; statements with no code of their own are skipped."""
    match node:
        case NodeList(kind=NodeType.STATEMENT_LIST):
            generate_statement(node.head, ctx, table)
            generate_statement(node.tail, ctx, table)
        case VarDec(name=name, value=value):
            var_name = f"%{name}"
            ctx.emit(f"  {var_name} = alloca i32")
            if value is not None:
                ctx.emit(f"  store i32 {_value(value, ctx, table)}, i32* {var_name}")
            table.add_var(name, var_name)
        case Assignment(name=name, value=value):
            var_name = table.lookup_var(name)
            if var_name is not None:
                ctx.emit(f"  store i32 {_value(value, ctx, table)}, i32* {var_name}")
        case Block(statements=statements):
            generate_statement(statements, ctx, table)
        case If():
            _if(node, ctx, table)
        case Return(value=value):
            ctx.emit(f"  ret i32 {_value(value, ctx, table)}")
        case Paint():
            _paint(node, ctx, table)
        case FuncCall():
            generate_expression(node, ctx, table)
        case _:
            pass