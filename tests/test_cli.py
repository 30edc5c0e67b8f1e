import json

import pytest

from cfpl.__main__ import main


def write(tmp_path, name, source):
    path = tmp_path / name
    path.write_text(source, encoding='utf-8')
    return path


def test_runs_program_file(tmp_path, capsys):
    path = write(tmp_path, 'hello.cfpl', 'VAR x = 5 AS INT\nOUTPUT: x + 3\n')
    main([str(path)])
    assert capsys.readouterr().out == '8\n'


def test_emit_and_execute_ast(tmp_path, capsys):
    path = write(tmp_path, 'loop.cfpl', 'FOR (VAR i = 0 AS INT; i < 2; i = i + 1)\nOUTPUT: i\n')
    main(['--emit-ast', str(path)])
    ast_path = tmp_path / 'loop.cfpl.ast.json'
    assert capsys.readouterr().out.strip() == str(ast_path)
    with open(ast_path, 'r', encoding='utf-8') as f:
        assert json.load(f)['type'] == 'Program'

    main(['--ast', str(ast_path)])
    assert capsys.readouterr().out == '0\n1\n'


def test_runtime_error_exit_status(tmp_path, capsys):
    path = write(tmp_path, 'bad.cfpl', 'OUTPUT: 1\nOUTPUT: 1 / 0\n')
    with pytest.raises(SystemExit) as excinfo:
        main([str(path)])
    assert excinfo.value.code == 70
    captured = capsys.readouterr()
    assert captured.out == '1\n'
    assert captured.err == 'Division by zero.\n[line 2]\n'


def test_syntax_error_exit_status(tmp_path, capsys):
    path = write(tmp_path, 'broken.cfpl', 'OUTPUT: (1\n')
    with pytest.raises(SystemExit) as excinfo:
        main([str(path)])
    assert excinfo.value.code == 65
    assert capsys.readouterr().err == "[line 1] Error at '\n': Expect ')' after expression.\n"


def test_emit_ast_refuses_broken_program(tmp_path):
    path = write(tmp_path, 'broken.cfpl', 'VAR x AS\n')
    with pytest.raises(SystemExit) as excinfo:
        main(['--emit-ast', str(path)])
    assert excinfo.value.code == 65
    assert not (tmp_path / 'broken.cfpl.ast.json').exists()


def test_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([str(tmp_path / 'nope.cfpl')])
    assert excinfo.value.code == 1
    assert 'not found' in capsys.readouterr().err


def test_verbose_writes_debug_file(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    path = write(tmp_path, 'hello.cfpl', 'OUTPUT: "hi"\n')
    main(['-vv', str(path)])
    assert capsys.readouterr().out == 'hi\n'
    assert 'execute Print' in (tmp_path / 'debug.txt').read_text(encoding='utf-8')
