from cfpl.ast import (
    Assign, Binary, Block, Expression, Grouping, If, Input, Literal, Logical,
    Print, Unary, Var, Variable, While,
)
from cfpl.errors import ErrorReporter
from cfpl.parser import parse
from cfpl.scanner import scan
from cfpl.tokens import TokenType as T
from cfpl.types import TRUE, Value


def parse_source(source, reporter=None):
    if reporter is None:
        reporter = ErrorReporter(echo=False)
    return parse(scan(source, reporter), reporter)


def test_parse_declaration_and_output():
    tokens = scan('VAR x = 5 AS INT\nOUTPUT: x + 3\n')
    program = parse(tokens)
    assert program == [
        Var(tokens[1], Literal(Value.integer(5)), tokens[5]),
        Print(Binary(Variable(tokens[8]), tokens[9], Literal(Value.integer(3)))),
    ]


def test_one_type_clause_covers_every_name():
    program = parse_source('VAR a, b = 2, c AS FLOAT\n')
    assert [stmt.name.lexeme for stmt in program] == ['a', 'b', 'c']
    assert all(stmt.data_type.type == T.FLOAT for stmt in program)
    assert program[0].data_type is program[2].data_type
    assert program[0].initializer is None
    assert program[1].initializer == Literal(Value.integer(2))


def test_multiplication_binds_tighter_than_addition():
    [stmt] = parse_source('x = 1 + 2 * 3\n')
    assign = stmt.expression
    assert isinstance(assign, Assign)
    assert assign.value.operator.type == T.PLUS
    assert assign.value.right.operator.type == T.STAR
    assert assign.value.right.left == Literal(Value.integer(2))


def test_concatenation_sits_at_comparison_level():
    [stmt] = parse_source('OUTPUT: 1 + 2 & 3 * 4\n')
    expr = stmt.expression
    assert expr.operator.type == T.AMPERSAND
    assert expr.left.operator.type == T.PLUS
    assert expr.right.operator.type == T.STAR


def test_modulo_is_multiplicative():
    [stmt] = parse_source('OUTPUT: 1 + 7 % 3\n')
    assert stmt.expression.operator.type == T.PLUS
    assert stmt.expression.right.operator.type == T.MODULO


def test_assignment_is_right_associative():
    [stmt] = parse_source('a = b = 1\n')
    outer = stmt.expression
    assert outer.name.lexeme == 'a'
    assert isinstance(outer.value, Assign)
    assert outer.value.name.lexeme == 'b'


def test_logical_and_unary_operators():
    [stmt] = parse_source('OUTPUT: NOT a OR b AND -c\n')
    expr = stmt.expression
    assert isinstance(expr, Logical) and expr.operator.type == T.OR
    assert isinstance(expr.left, Unary) and expr.left.operator.type == T.NOT
    assert isinstance(expr.right, Logical) and expr.right.operator.type == T.AND
    assert isinstance(expr.right.right, Unary)


def test_invalid_assignment_target_is_reported_and_parsing_continues():
    reporter = ErrorReporter(echo=False)
    program = parse_source('(a) = 1\nOUTPUT: 2\n', reporter)
    assert reporter.messages() == ['Invalid assignment target.']
    assert isinstance(program[0], Expression)
    assert isinstance(program[0].expression, Grouping)
    assert isinstance(program[1], Print)


def test_for_loop_is_desugared():
    [loop] = parse_source('FOR (VAR i = 0 AS INT; i < 3; i = i + 1;)\nOUTPUT: i\n')
    assert isinstance(loop, Block)
    init, while_stmt = loop.statements
    assert isinstance(init, Var) and init.name.lexeme == 'i'
    assert init.data_type.type == T.INT
    assert isinstance(while_stmt, While)
    assert while_stmt.condition.operator.type == T.LESS
    body, increment = while_stmt.body.statements
    assert isinstance(body, Print)
    assert isinstance(increment, Expression)
    assert isinstance(increment.expression, Assign)


def test_for_loop_without_clauses():
    [loop] = parse_source('FOR (;;)\nOUTPUT: 1\n')
    assert isinstance(loop, While)
    assert loop.condition == Literal(TRUE)
    assert isinstance(loop.body, Print)


def test_for_loop_with_expression_initializer():
    [loop] = parse_source('FOR (i = 0; i < 2; i = i + 1)\nOUTPUT: i\n')
    init, while_stmt = loop.statements
    assert isinstance(init, Expression)
    assert isinstance(while_stmt, While)


def test_block_with_declarations():
    [block] = parse_source('START\nVAR a = 1 AS INT\nOUTPUT: a\nSTOP\n')
    assert isinstance(block, Block)
    assert [type(s) for s in block.statements] == [Var, Print]


def test_if_else():
    [stmt] = parse_source('IF (a > 1)\nOUTPUT: 1\nELSE\nOUTPUT: 2\n')
    assert isinstance(stmt, If)
    assert isinstance(stmt.then_branch, Print)
    assert isinstance(stmt.else_branch, Print)


def test_if_without_else():
    [stmt] = parse_source('IF (a)\nSTART\nOUTPUT: 1\nSTOP\n')
    assert isinstance(stmt.then_branch, Block)
    assert stmt.else_branch is None


def test_while():
    [stmt] = parse_source('WHILE (n > 0)\nn = n - 1\n')
    assert isinstance(stmt, While)
    assert isinstance(stmt.body, Expression)


def test_input_names():
    [stmt] = parse_source('INPUT: a, b\n')
    assert isinstance(stmt, Input)
    assert [t.lexeme for t in stmt.names] == ['a', 'b']


def test_literals():
    [stmt] = parse_source('OUTPUT: TRUE & FALSE & # & \'c\' & "s" & 1.5\n')
    literals = []
    expr = stmt.expression
    while isinstance(expr, Binary):
        literals.insert(0, expr.right.value)
        expr = expr.left
    literals.insert(0, expr.value)
    assert literals == [
        Value.boolean(True), Value.boolean(False), Value.character('\n'),
        Value.character('c'), Value.string('s'), Value.float_(1.5),
    ]


def test_last_line_may_omit_line_break():
    assert parse_source('OUTPUT: 1') == [Print(Literal(Value.integer(1)))]


def test_errors_are_recovered_at_statement_boundaries():
    reporter = ErrorReporter(echo=False)
    program = parse_source('x = \nOUTPUT: 1\ny = )\nOUTPUT: 2\n', reporter)
    assert [s.expression.value for s in program] == [Value.integer(1), Value.integer(2)]
    assert reporter.messages() == ['Expect expression.', 'Expect expression.']
    assert [d.line for d in reporter.diagnostics] == [1, 3]


def test_error_inside_block_keeps_the_rest_of_the_block():
    reporter = ErrorReporter(echo=False)
    [block] = parse_source('START\nOUTPUT: (1\nOUTPUT: 2\nSTOP\n', reporter)
    assert [s.expression.value for s in block.statements] == [Value.integer(2)]
    assert reporter.messages() == ["Expect ')' after expression."]


def test_missing_stop_is_reported():
    reporter = ErrorReporter(echo=False)
    assert parse_source('START\nOUTPUT: 1\n', reporter) == []
    assert reporter.messages() == ["Expect 'STOP' after block."]
    assert reporter.last().where == ' at end'


def test_missing_type_clause_is_reported():
    reporter = ErrorReporter(echo=False)
    parse_source('VAR a = 1\n', reporter)
    assert reporter.messages() == ["Expect 'AS' after variable declaration."]

    reporter = ErrorReporter(echo=False)
    parse_source('VAR a AS NUMBER\n', reporter)
    assert reporter.messages() == ["Expect data type after 'AS'."]
