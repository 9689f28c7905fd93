import sys

import pytest

from toys import ast as A
from toys.errors import (
    DivisionByZeroError, MissingMainError, StackExhaustionError, ToysError,
    UndefinedFunctionError,
)
from toys.interpreter import (
    Interpreter, Phase, compile_module, parse_program, run_lines, run_program,
)


def test_main_runs_in_root_frame():
    interp = Interpreter()
    result = interp.call_main(parse_program("define main() { a = 4; a * 2; }"))
    assert result == 8
    assert interp.result == 8
    assert interp.global_env.values == {'a': 4}
    assert interp.phase is Phase.RAN


def test_globals_evaluate_in_order():
    source = """
        global a = 2;
        global b = a * 10;
        define main() { a + b; }
    """
    assert run_program(source) == 22


def test_global_may_call_earlier_function():
    source = """
        define two() { 2; }
        global g = two() + 1;
        define main() { g; }
    """
    assert run_program(source) == 3


def test_global_may_not_call_later_function():
    source = """
        global g = later();
        define later() { 2; }
        define main() { g; }
    """
    with pytest.raises(UndefinedFunctionError):
        run_program(source)


def test_later_definition_replaces_earlier():
    source = """
        define pick() { 1; }
        define main() { pick(); }
        define pick() { 2; }
    """
    assert run_program(source) == 2


def test_main_parameters_are_not_bound():
    interp = Interpreter()
    program = A.program(
        A.define_global('x', A.integer(5)),
        A.define_function('main', ['x'], A.symbol('x')),
    )
    assert interp.call_main(program) == 5


def test_missing_main():
    with pytest.raises(MissingMainError) as info:
        run_program("define helper() { 1; }")
    assert info.value.kind == 'MissingMain'


def test_empty_program_has_no_main():
    with pytest.raises(MissingMainError):
        run_program("")


def test_phases_only_move_forward():
    interp = Interpreter()
    with pytest.raises(ToysError):
        interp.run()
    interp.load(parse_program("define main() { 1; }"))
    assert interp.phase is Phase.LOADED
    with pytest.raises(ToysError):
        interp.load(parse_program("define main() { 2; }"))
    assert interp.run() == 1
    with pytest.raises(ToysError):
        interp.run()



def test_failed_run_still_counts_as_ran():
    interp = Interpreter()
    interp.load(parse_program("define main() { 1 / 0; }"))
    with pytest.raises(DivisionByZeroError):
        interp.run()
    assert interp.phase is Phase.RAN
    with pytest.raises(ToysError):
        interp.run()

def test_multi_level_recursion_sees_rebound_parameter():
    # With the call on the left, g(n-1) rebinds n in the current frame before
    # the right operand reads it, so each level multiplies by n-1: g(5) == 4!
    source = """
        define g(n) { if (n < 2) { 1; } else { g(n - 1) * n; } }
        define main() { g(5); }
    """
    assert run_program(source) == 24


def test_multi_level_recursion_reading_parameter_first():
    source = """
        define fact(n) { if (n < 2) { 1; } else { n * fact(n - 1); } }
        define main() { fact(10); }
    """
    assert run_program(source) == 3628800


def test_deep_chain_exposes_ancestor_bindings():
    # depth(k) reads `outer`, bound only by main, from the bottom of the chain
    source = """
        define depth(k) { if (k == 0) { outer; } else { depth(k - 1); } }
        define main() { outer = 77; depth(20); }
    """
    assert run_program(source) == 77


def test_runaway_recursion_is_stack_exhaustion():
    source = """
        define forever(n) { forever(n + 1); }
        define main() { forever(0); }
    """
    with pytest.raises(StackExhaustionError):
        run_program(source)


def test_thousand_deep_recursion_completes():
    source = """
        define s(n) { if (n < 1) { 0; } else { n + s(n - 1); } }
        define main() { s(1000); }
    """
    assert run_program(source) == 500500


def test_recursion_limit_is_restored_after_run():
    before = sys.getrecursionlimit()
    with pytest.raises(StackExhaustionError):
        run_program("define forever(n) { forever(n + 1); } define main() { forever(0); }")
    assert run_program("define main() { 1; }") == 1
    assert sys.getrecursionlimit() == before


def test_explicit_recursion_limit_bounds_depth():
    interp = Interpreter(recursion_limit=sys.getrecursionlimit() + 200)
    program = parse_program("define s(n) { if (n < 1) { 0; } else { n + s(n - 1); } } define main() { s(100000); }")
    with pytest.raises(StackExhaustionError):
        interp.call_main(program)


def test_evaluate_alone_leaves_recursion_error_unconverted():
    interp = Interpreter()
    interp.load(parse_program("define forever(n) { forever(n + 1); } define main() { 0; }"))
    with pytest.raises(RecursionError):
        interp.evaluate(A.call('forever', A.integer(0)), interp.global_env)


def test_line_mode():
    assert run_lines("i = 0; while (i < 10) { i = i + 1; } i;") == 10
    assert run_lines("") == 0
    assert run_lines("a = 1; a = a + 1;") == 2


def test_line_mode_has_no_functions():
    with pytest.raises(UndefinedFunctionError):
        run_lines("f(1);")


def test_compile_module_returns_interpreter():
    interp = compile_module('examples/program_3.toys')
    assert interp.result == 36
    assert interp.phase is Phase.RAN


def test_debug_log(tmp_path):
    log = tmp_path / 'debug.txt'
    interp = Interpreter(debug_level=2, debug_file=str(log))
    interp.call_main(parse_program("global k = 1; define f(n) { n; } define main() { f(k); }"))
    text = log.read_text()
    assert 'LOAD 3 definitions' in text
    assert 'global k = 1' in text
    assert 'define function f(n)' in text
    assert 'call f(1)' in text
    assert 'return f -> 1' in text
    assert 'main -> 1' in text
    assert interp.debug_fp.closed


def test_no_debug_file_by_default(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    run_program("define main() { 1; }")
    assert not (tmp_path / 'debug.txt').exists()
