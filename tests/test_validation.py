import pytest

from geoproof.ast import Program, Span, Stmt
from geoproof.parser import parse_program
from geoproof.validate import ValidationError, validate


def stmt(kind, data, line=1, col=1):
    return Stmt(kind, Span(line, col), data)


def points(*names):
    return stmt('points', {'points': [(name, None) for name in names]})


def prove(relation, *figures, line=9):
    return stmt('prove', {'relation': relation, 'figures': list(figures)}, line=line)


def test_validate_accepts_valid_program():
    prog = parse_program(
        '''
problem "Isosceles"
points A, B, C
triangle ABC
given congruent AB AC
prove congruent <ABC <ACB
'''
    )

    validate(prog)


@pytest.mark.parametrize(
    'statements, message_part',
    [
        ([points('A', 'A')], 'point A declared twice'),
        ([points('AB')], 'point names are single letters'),
        ([points('A', 'B', 'C'), stmt('segment', {'ids': ['A', 'B', 'C']})], 'expected 2 vertices, got 3'),
        ([points('A', 'B'), stmt('angle', {'ids': ['A', 'B', 'A']})], 'vertices must be distinct'),
        ([points('A', 'B'), stmt('segment', {'ids': ['A', 'D']})], 'point D is not declared'),
        ([points('A', 'B', 'C'), prove('tangent', 'AB', 'BC')], 'unknown relation "tangent"'),
        ([points('A', 'B', 'C'), prove('right', '<ABC', '<BCA')], 'right takes 1 figure(s), got 2'),
        ([points('A', 'B', 'C'), prove('congruent', 'AB')], 'congruent takes 2 figure(s), got 1'),
        ([points('A', 'B', 'C'), prove('congruent', '^AB', '^BC')], 'marked figure ^AB must name three points'),
        ([points('A', 'B', 'C'), prove('congruent', 'AA', 'BC')], 'invalid figure name AA'),
        ([points('A', 'B'), prove('congruent', 'AB', 'BX')], 'point X is not declared'),
    ],
)
def test_validate_rejects_bad_statements(statements, message_part):
    with pytest.raises(ValidationError) as exc:
        validate(Program(statements + [prove('right', '<ABC', line=20)]))

    assert message_part in str(exc.value)
    assert str(exc.value).startswith('[line ')


def test_only_one_prove_statement():
    prog = Program([points('A', 'B', 'C'), prove('right', '<ABC'), prove('right', '<BCA', line=10)])

    with pytest.raises(ValidationError) as exc:
        validate(prog)

    assert str(exc.value) == '[line 10, col 1] only one prove statement is allowed'


def test_program_needs_a_goal():
    prog = Program([points('A', 'B'), stmt('segment', {'ids': ['A', 'B']})])

    with pytest.raises(ValidationError) as exc:
        validate(prog)

    assert 'no prove statement' in str(exc.value)


def test_problem_title_only_once():
    prog = Program([stmt('problem', {'title': 'a'}), stmt('problem', {'title': 'b'}, line=2)])

    with pytest.raises(ValidationError, match='more than once'):
        validate(prog)
