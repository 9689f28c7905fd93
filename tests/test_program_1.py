from toys.interpreter import parse_program, Interpreter


def test_program_1_adds_literals():
    with open('examples/program_1.toys', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    assert interp.call_main(ast) == 120
