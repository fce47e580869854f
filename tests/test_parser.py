import pytest

from geoproof.lexer import tokenize_line
from geoproof.parser import parse_program

SOURCE = '''
problem "Bisected base"   # comment
points A(0, 4), C(0, 0), F(-3, 0), B(3, 0)
triangle A-C-F
triangle ACB
segment F-B
given bisects A-C F-B
prove congruent F-C, C-B
'''


def test_parse_program_reads_all_statement_kinds():
    prog = parse_program(SOURCE)

    assert [s.kind for s in prog.stmts] == [
        'problem',
        'points',
        'triangle',
        'triangle',
        'segment',
        'given',
        'prove',
    ]
    assert prog.stmts[0].data == {'title': 'Bisected base'}
    assert prog.stmts[1].data['points'] == [
        ('A', (0.0, 4.0)),
        ('C', (0.0, 0.0)),
        ('F', (-3.0, 0.0)),
        ('B', (3.0, 0.0)),
    ]
    assert prog.stmts[2].data == {'ids': ['A', 'C', 'F']}
    assert prog.stmts[3].data == {'ids': ['A', 'C', 'B']}
    assert prog.stmts[5].data == {'relation': 'bisects', 'figures': ['AC', 'FB']}
    assert prog.stmts[6].data == {'relation': 'congruent', 'figures': ['FC', 'CB']}
    assert prog.stmts[6].span.line == 8


def test_points_without_coordinates():
    prog = parse_program('points a, b, c')

    assert prog.stmts[0].data['points'] == [('A', None), ('B', None), ('C', None)]


@pytest.mark.parametrize(
    'line, figures',
    [
        ('given congruent ^ABC ^DEF', ['^ABC', '^DEF']),
        ('given congruent ΔA-B-C ΔD-E-F', ['^ABC', '^DEF']),
        ('given congruent <ABC ∠DEF', ['<ABC', '<DEF']),
        ('prove right <A-B-C', ['<ABC']),
        ('given midpoint M A-B', ['M', 'AB']),
    ],
)
def test_figure_markers_are_normalized(line, figures):
    prog = parse_program(line)

    assert prog.stmts[0].data['figures'] == figures


def test_keywords_are_case_insensitive():
    prog = parse_program('Given Congruent AB CD')

    assert prog.stmts[0].kind == 'given'
    assert prog.stmts[0].data['relation'] == 'congruent'


def test_blank_and_comment_lines_are_skipped():
    prog = parse_program('\n# nothing here\n\nsegment AB\n')

    assert len(prog.stmts) == 1
    assert prog.stmts[0].span.line == 4


@pytest.mark.parametrize(
    'text, message_part',
    [
        ('circle ABC', "unknown statement 'circle'"),
        ('given congruent', "expected figure after 'congruent'"),
        ('segment AB )', "unexpected token ')'"),
        ('points A(1 2)', 'expected COMMA, got NUMBER'),
        ('problem "open', 'unterminated string literal'),
        ('segment A$B', 'unexpected character'),
    ],
)
def test_syntax_errors_report_location(text, message_part):
    with pytest.raises(SyntaxError) as exc:
        parse_program(text)

    assert message_part in str(exc.value)
    assert '[line 1, col' in str(exc.value)


def test_syntax_error_includes_caret_snippet():
    with pytest.raises(SyntaxError) as exc:
        parse_program('segment AB\nsegment CD )')

    message = str(exc.value)
    assert message.startswith('[line 2, col 12]')
    assert message.splitlines()[1:] == ['    segment CD )', '               ^']


def test_tokenize_line_markers_and_strings():
    tokens = tokenize_line('problem "ΔABC \\"kite\\"" # note', 3)
    assert tokens == [('ID', 'problem', 3, 1), ('STRING', 'ΔABC "kite"', 3, 9)]

    kinds = [t[0] for t in tokenize_line('given congruent ∠A-B-C <DEF', 1)]
    assert kinds == ['ID', 'ID', 'ANGLE', 'ID', 'DASH', 'ID', 'DASH', 'ID', 'ANGLE', 'ID']
