from toys.interpreter import parse_program, Interpreter


def test_program_3_reads_global():
    with open('examples/program_3.toys', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    assert interp.call_main(ast) == 36
    assert interp.global_env.values == {'pi': 3}
