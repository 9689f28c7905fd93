from toys.interpreter import parse_program, Interpreter


def test_program_7_for_loop_prints(capsys):
    with open('examples/program_7.toys', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    result = interp.call_main(ast)
    out = capsys.readouterr().out.strip().split('\n')
    assert out == ['1', '2', '3', '4', '5']
    assert result == 15
    # the loop variable ends one past the upper bound
    assert interp.global_env.values['k'] == 6
