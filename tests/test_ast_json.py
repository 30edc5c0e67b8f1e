import json
import math
from pathlib import Path

import pytest

from cfpl.ast_json import program_from_obj, program_to_obj, value_from_obj, value_to_obj
from cfpl.interpreter import parse_program, Interpreter
from cfpl.types import Value

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_survives_json(capsys):
    with open(EXAMPLES / 'program_3.cfpl', 'r', encoding='utf-8') as f:
        ast = parse_program(f.read())
    text = json.dumps(program_to_obj(ast))
    restored = program_from_obj(json.loads(text))
    assert restored == ast
    Interpreter().run(restored)
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == '1x1=1'
    assert lines[-1] == '3x3=9'


def test_every_statement_kind_is_serialized():
    source = (
        'VAR a = 1, b AS INT\n'
        'INPUT: b\n'
        'START\n'
        'IF (NOT a == b OR a > 0)\n'
        'OUTPUT: "x" & # & \'c\'\n'
        'ELSE\n'
        'a = -a\n'
        'STOP\n'
        'WHILE (FALSE AND (a <> 2.5))\n'
        'a = a % 2\n'
    )
    ast = parse_program(source)
    obj = program_to_obj(ast)
    assert obj['type'] == 'Program'
    assert [s['type'] for s in obj['body']] == ['Var', 'Var', 'Input', 'Block', 'While']
    assert program_from_obj(json.loads(json.dumps(obj))) == ast


def test_non_finite_floats():
    obj = json.loads(json.dumps(value_to_obj(Value.float_(math.inf))))
    assert value_from_obj(obj) == Value.float_(math.inf)


def test_rejects_unknown_documents():
    with pytest.raises(ValueError):
        program_from_obj({'type': 'Module', 'body': []})
    with pytest.raises(ValueError):
        program_from_obj({'type': 'Program', 'body': [{'type': 'Goto'}]})
