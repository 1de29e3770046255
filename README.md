# stencilc

`stencilc` turns syntax trees of a small stencil painting language into
textual LLVM IR. It also has a canvas that holds painted pixels and renders
them for the terminal as ANSI-coloured blocks.

A stencil program declares global variables, functions and stencils. It then
applies those stencils to a square region of the canvas. Optional location and
size directives set where the region is and how big it is.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install .[test]
pytest
```

## Building a syntax tree

You build the tree from the node classes in `stencilc.ast`: `Number`,
`Identifier`, `BinaryOp`, `UnaryOp`, `Assignment`, `VarDec`, `Block`, `If`,
`FuncDec`, `FuncCall`, `Stencil`, `Apply`, `Paint`, `Return`, `Coordinate`,
`LocationDirective`, `SizeDirective`, `Program` and `NodeList`.

A `NodeList` is a cons cell of `head` and `tail`, and its `kind` is one of the
list members of `NodeType`. Any other kind raises `ValueError`. Operators are
members of `OpType`, and `OpType.symbol()` gives the operator as it is written.

`format_ast` returns the tree as an indented outline. `print_ast` writes that
outline to a file, which is standard output by default.

```python
from stencilc.ast import (
    Apply, BinaryOp, Coordinate, Identifier, LocationDirective, NodeList,
    Number, OpType, Paint, SizeDirective, Stencil, format_ast,
)

stencil = Stencil("diag", Paint(BinaryOp(OpType.PLUS, Identifier("x"), Number(1))))
apply = Apply(
    "diag",
    NodeList(
        LocationDirective(Coordinate(Number(2), Number(3))),
        SizeDirective(Number(10)),
    ),
)
program = NodeList(stencil, apply)
print(format_ast(program))
```

## Generating LLVM IR

`stencilc.codegen.compile_program` returns the whole module as a string:

```python
from stencilc.codegen import compile_program

ir = compile_program(program)
print(ir)
```

The module contains:

- declarations of the runtime functions `paint_pixel`, `get_canvas_width` and
  `get_canvas_height`;
- a global `i32` for each top-level variable declaration;
- a function for each function declaration;
- a function `stencil_<name>` for each stencil;
- `llvm_main`, which holds one loop nest over the region for every `apply` of
  a declared stencil.

A location directive sets the offset, which is 0, 0 by default. A size
directive sets the side of the square region, which is 50 by default. Only
constant numbers are read from directives. `collect_apply_settings` returns
them as an `ApplySettings` value.

For finer control, `generate_code` writes into a `CodeGenContext` and fills a
`SymbolTable`, both from `stencilc.symbols`. Read the text back with
`CodeGenContext.getvalue()`. The lower-level pieces are
`generate_global_decls`, `generate_apply_statements`,
`emit_runtime_functions` and `emit_main_function` in `stencilc.codegen`, and
`generate_expression` and `generate_statement` in `stencilc.expressions`. An
operand that is missing, or that is not an expression, raises `ValueError`.

## The canvas

`stencilc.runtime.Canvas` is a grid of colours:

```python
from stencilc.runtime import Canvas

canvas = Canvas(25, 25)
canvas.paint_pixel(3, 4, 2)   # green
canvas.pixel(3, 4)            # Color(code=2)
text = canvas.render()        # ANSI-coloured text, one line per row
canvas.render_to()            # writes the same text to standard output
canvas.clear()                # back to all black
```

- Colour values are taken modulo 8 (`value_to_color`). 0 is black, 1 red,
  2 green, 3 yellow, 4 blue, 5 magenta, 6 cyan and 7 white.
  `Color.ansi()` gives the background escape sequence for a colour.
- `paint_pixel` ignores points outside the canvas. `pixel` raises
  `IndexError` for them.
- Sizes above 200 are clamped to 200. Sizes of zero or below fall back to 100.

## What it does not do

- There is no parser. Programs have to be built as syntax trees in Python.
- There is no command-line tool.
- The package does not assemble or run the IR it generates. Generated code
  does not paint on a `Canvas`. Running it needs an LLVM toolchain and a
  runtime that provides `paint_pixel` and the other declared functions.