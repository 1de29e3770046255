from stencilc.symbols import CodeGenContext, FuncEntry, SymbolTable


def test_new_context_starts_clean():
    ctx = CodeGenContext()
    assert ctx.temp_counter == 0
    assert ctx.label_counter == 0
    assert ctx.string_counter == 0
    assert ctx.in_stencil is False
    assert ctx.current_function is None
    assert ctx.getvalue() == ""


def test_new_temp_names_are_fresh():
    ctx = CodeGenContext()
    names = [ctx.new_temp() for _ in range(5)]
    assert names[0] == "%tmp0"
    assert len(set(names)) == len(names)
    assert all(name.startswith("%tmp") for name in names)
    assert ctx.temp_counter == len(names)


def test_new_label_names_are_fresh():
    ctx = CodeGenContext()
    labels = [ctx.new_label() for _ in range(4)]
    assert labels[0] == "label0"
    assert len(set(labels)) == len(labels)
    assert ctx.label_counter == len(labels)


def test_new_string_const_names_are_fresh():
    ctx = CodeGenContext()
    first = ctx.new_string_const()
    second = ctx.new_string_const()
    assert first == "@.str0"
    assert second.startswith("@.str")
    assert first != second


def test_counters_are_independent():
    ctx = CodeGenContext()
    ctx.new_temp()
    ctx.new_temp()
    assert ctx.new_label() == "label0"
    assert ctx.new_string_const() == "@.str0"


def test_emit_and_getvalue():
    ctx = CodeGenContext()
    ctx.emit("define i32 @f() {")
    ctx.emit("")
    ctx.emit("}")
    assert ctx.getvalue() == "define i32 @f() {\n\n}\n"


def test_var_lookup_and_shadowing():
    table = SymbolTable()
    assert table.lookup_var("a") is None
    table.add_var("a", "@a")
    assert table.lookup_var("a") == "@a"
    table.add_var("a", "%a")
    assert table.lookup_var("a") == "%a"


def test_func_lookup():
    table = SymbolTable()
    assert table.lookup_func("f") is None
    table.add_func("f", 2)
    assert table.lookup_func("f") == FuncEntry("f", 2)


def test_stencil_lookup():
    table = SymbolTable()
    assert table.lookup_stencil("box") is None
    table.add_stencil("box")
    assert table.lookup_stencil("box") == "box"


def test_child_sees_parent_vars_only():
    parent = SymbolTable()
    parent.add_var("g", "@g")
    parent.add_func("f", 1)
    parent.add_stencil("s")
    scope = parent.child()
    assert scope.lookup_var("g") == "@g"
    assert scope.lookup_func("f") is None
    assert scope.lookup_stencil("s") is None


def test_child_declarations_do_not_leak():
    parent = SymbolTable()
    parent.add_var("g", "@g")
    scope = parent.child()
    scope.add_var("local", "%local")
    scope.add_var("g", "%g")
    assert parent.lookup_var("local") is None
    assert parent.lookup_var("g") == "@g"
    assert scope.lookup_var("g") == "%g"