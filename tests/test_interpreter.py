"""Pytest-based interpreter tests: values, operators, control flow, functions."""

import sys

import pytest

from tl.reporter import (
    ArgumentCountMismatch,
    DivisionByZero,
    IndexOutOfBounds,
    InputFailure,
    TLRuntimeError,
    TypeMismatch,
    UndefinedName,
)


def test_arithmetic_precedence(run):
    assert run("print(2 + 3 * 4); print((2 + 3) * 4);") == ["14", "20"]


def test_integer_division_truncates_toward_zero(run):
    assert run("print(7 / 2); print(-7 / 2); print(7 / -2);") == ["3", "-3", "-3"]


def test_float_promotion(run):
    assert run("print(1 + 2.5); print(7 / 2.0); print(2.0 * 3);") == ["3.5", "3.5", "6"]


def test_string_concatenation(run):
    assert run('print("a" + 1); print(1 + "a"); print("x" + 2.5 + \'c\');') == [
        "a1", "1a", "x2.5c",
    ]


def test_string_equality(run):
    assert run('print("ab" == "ab"); print("ab" != "ab");') == ["1", "0"]


def test_string_arithmetic_is_rejected(run):
    with pytest.raises(TypeMismatch):
        run('print("a" - 1);')


def test_char_comparison_and_arithmetic(run):
    assert run("print('a' == 'a'); print('a' + 1);") == ["1", "98"]
    with pytest.raises(TypeMismatch):
        run("print('a' < 'b');")


def test_comparisons_and_logic_yield_ints(run):
    assert run("print(3 > 2); print(3 < 2); print(1 && 0); print(0 || 5); print(!0);") == [
        "1", "0", "0", "1", "1",
    ]


def test_print_bool_literals(run):
    assert run("print(true); print(false); bool b = true; print(b);") == [
        "true", "false", "1",
    ]


def test_and_short_circuits(run):
    source = """
    ComeAndDo f() { print(99); return 1; }
    int x = 0;
    if (x != 0 && f()) { print(1); } else { print(0); }
    if (x == 0 || f()) { print(2); }
    """
    assert run(source) == ["0", "2"]


def test_short_circuit_skips_division(run):
    assert run("print(false && (1 / 0 == 0)); print(true || (1 / 0 == 0));") == ["0", "1"]


def test_parameter_shadows_outer_variable(run):
    source = "int x = 7; ComeAndDo f(x) { x = x + 1; return x; } print(f(1)); print(x);"
    assert run(source) == ["2", "7"]


def test_block_assignment_updates_outer_variable(run):
    assert run("int x = 1; if (1) { x = 2; } while (x < 5) { x = x + 1; } print(x);") == ["5"]


def test_declared_types_coerce(run):
    source = """
    int i = 3.9;
    float f = 2;
    bool b = 7;
    char c = 65;
    print(i); print(f + 0.5); print(b); print(c);
    """
    assert run(source) == ["3", "2.5", "1", "A"]


def test_default_values(run):
    assert run('int i; float f; string s; print(i); print(f); print(s + "!");') == [
        "0", "0", "!",
    ]


def test_undefined_variable(run):
    with pytest.raises(UndefinedName) as info:
        run("print(1);\nprint(nope);")
    assert info.value.line == 2
    assert str(info.value).startswith("undefined name: line 2, column 7")


@pytest.mark.parametrize("source", ["print(1 / 0);", "print(1.5 / 0);", "int z = 0; print(3 / z);"])
def test_division_by_zero(run, source):
    with pytest.raises(DivisionByZero):
        run(source)


def test_if_else_chain(run):
    source = """
    ComeAndDo sign(n) {
        if (n < 0) { return -1; } else if (n == 0) { return 0; } else { return 1; }
    }
    print(sign(-5)); print(sign(0)); print(sign(8));
    """
    assert run(source) == ["-1", "0", "1"]


def test_while_loop(run):
    source = """
    int i = 0;
    int total = 0;
    while (i < 5) { total = total + i; i = i + 1; }
    print(total);
    """
    assert run(source) == ["10"]


def test_for_loop(run):
    assert run("for (int i = 0; i < 3; i = i + 1) { print(i); }") == ["0", "1", "2"]


def test_return_leaves_loops(run):
    source = """
    ComeAndDo first_over(limit) {
        for (int i = 0; 1; i = i + 1) {
            while (1) {
                if (i * i > limit) { return i; }
                i = i + 1;
            }
        }
    }
    print(first_over(10));
    """
    assert run(source) == ["4"]


def test_recursion(run):
    source = """
    ComeAndDo fact(n) { if (n < 2) { return 1; } return n * fact(n - 1); }
    ComeAndDo fib(n) { if (n < 2) { return n; } return fib(n - 1) + fib(n - 2); }
    print(fact(10)); print(fib(15));
    """
    assert run(source) == ["3628800", "610"]


def test_deep_recursion(run):
    source = """
    ComeAndDo total(n) { if (n < 1) { return 0; } return n + total(n - 1); }
    print(total(1000));
    """
    assert run(source) == ["500500"]


def test_recursion_limit_is_restored_after_run(run):
    limit = sys.getrecursionlimit()
    run("ComeAndDo f(n) { if (n < 1) { return 0; } return f(n - 1); } print(f(300));")
    assert sys.getrecursionlimit() == limit


def test_functions_are_hoisted(run):
    assert run("print(twice(4)); ComeAndDo twice(x) { return x * 2; }") == ["8"]


def test_function_without_return_yields_zero(run):
    assert run("ComeAndDo f() { int x = 1; } print(f());") == ["0"]


def test_parameters_do_not_leak(run):
    source = """
    ComeAndDo f(x) { int y = x + 1; return y; }
    print(f(1));
    print(x);
    """
    with pytest.raises(UndefinedName):
        run(source)


def test_locals_shadow_and_globals_update(run):
    source = """
    int x = 1;
    int counter = 0;
    ComeAndDo f() { int x = 50; counter = counter + 1; return x; }
    print(f()); print(f()); print(x); print(counter);
    """
    assert run(source) == ["50", "50", "1", "2"]


def test_unknown_function(run):
    with pytest.raises(UndefinedName):
        run("print(g(1));")


def test_argument_count_mismatch(run):
    with pytest.raises(ArgumentCountMismatch):
        run("ComeAndDo f(a, b) { return a; } print(f(1));")


def test_runaway_recursion_is_a_runtime_error(run):
    with pytest.raises(TLRuntimeError) as info:
        run("ComeAndDo f(n) { return f(n + 1); } print(f(0));")
    assert "call depth exceeded" in str(info.value)


def test_top_level_return_ends_the_run(run):
    assert run("print(1); return; print(2);") == ["1"]


def test_fixed_arrays(run):
    source = """
    int a[3];
    a[0] = 5;
    a[2] = a[0] * 2;
    print(a[0] + a[1] + a[2]);
    """
    assert run(source) == ["15"]


def test_array_index_out_of_bounds(run):
    with pytest.raises(IndexOutOfBounds):
        run("int a[3]; print(a[3]);")
    with pytest.raises(IndexOutOfBounds):
        run("int a[3]; a[-1] = 1;")
    with pytest.raises(IndexOutOfBounds):
        run("int a[3]; a[3] = 1;")


def test_growable_arrays(run):
    source = """
    int a[] = {1, 2};
    a[2] = 3;
    int b[];
    b[0] = 7;
    print(a[0] + a[1] + a[2]); print(b[0]);
    """
    assert run(source) == ["6", "7"]


def test_array_literal_assignment_infers_type(run):
    assert run("xs = {1.5, 2}; print(xs[1]);") == ["2"]


def test_array_elements_coerce(run):
    assert run("float a[2]; a[0] = 1; print(a[0] / 2);") == ["0.5"]


def test_array_name_is_not_a_value(run):
    with pytest.raises(TypeMismatch):
        run("int a[2]; print(a + 1);")


def test_string_indexing(run):
    assert run('string s = "hey"; print(s[1]);') == ["e"]
    with pytest.raises(IndexOutOfBounds):
        run('string s = "hey"; print(s[3]);')


def test_input_reads_whitespace_separated_integers(run):
    source = "int a = input(); int b = input(); int c = input(); print(a + b + c);"
    assert run(source, stdin="1 2\n  3\n") == ["6"]


def test_input_failures(run):
    with pytest.raises(InputFailure):
        run("print(input());", stdin="")
    with pytest.raises(InputFailure):
        run("print(input());", stdin="abc\n")


def test_read_takes_first_integer_of_file(run, tmp_path):
    path = tmp_path / "numbers.txt"
    path.write_text("  42 7\n")
    assert run(f'print(read("{path}") + 1);') == ["43"]


def test_read_binary_file(run, tmp_path):
    path = tmp_path / "blob.bin"
    path.write_bytes(b"\xff\xfe\x00\x81 12")
    with pytest.raises(InputFailure) as info:
        run(f'print(read("{path}"));')
    assert "not readable text" in str(info.value)


def test_not_of_negation(run):
    assert run("print(!-1); print(!-0);") == ["0", "1"]


def test_read_missing_file(run, tmp_path):
    with pytest.raises(InputFailure):
        run(f'print(read("{tmp_path / "missing.txt"}"));')


def test_runs_are_deterministic(run):
    source = """
    int a[] = {3, 1, 2};
    for (int i = 0; i < 3; i = i + 1) { print(a[i] * i); }
    """
    assert run(source) == run(source)
