from typing import List, Set

from .ast import Program, Span, Stmt
from .figures import NAME_LENGTHS
from .relations import SINGLE_OPERAND_TYPES, RelationType


class ValidationError(Exception):
    pass


def _err(sp: Span, message: str) -> ValidationError:
    return ValidationError(f'[line {sp.line}, col {sp.col}] {message}')


def _ensure_distinct(ids: List[str], sp: Span, expect: int):
    if len(ids) != expect:
        raise _err(sp, f'expected {expect} vertices, got {len(ids)}')
    if len(set(ids)) != expect:
        raise _err(sp, 'vertices must be distinct')


def _ensure_declared(ids, declared: Set[str], sp: Span):
    for name in ids:
        if name not in declared:
            raise _err(sp, f'point {name} is not declared')


def _validate_statement(s: Stmt, declared: Set[str]):
    relation = s.data['relation']
    try:
        relation_type = RelationType(relation)
    except ValueError:
        raise _err(s.span, f'unknown relation "{relation}"') from None
    figures = s.data['figures']
    expect = 1 if relation_type in SINGLE_OPERAND_TYPES else 2
    if len(figures) != expect:
        raise _err(s.span, f'{relation} takes {expect} figure(s), got {len(figures)}')
    for ref in figures:
        letters = ref.lstrip('^<')
        if ref[:1] in '^<' and len(letters) != 3:
            raise _err(s.span, f'marked figure {ref} must name three points')
        if len(letters) > 3 or len(set(letters)) != len(letters):
            raise _err(s.span, f'invalid figure name {ref}')
        _ensure_declared(letters, declared, s.span)


def validate(prog: Program) -> None:
    declared: Set[str] = set()
    titles = 0
    goals = 0
    for s in prog.stmts:
        k = s.kind
        if k == 'problem':
            titles += 1
            if titles > 1:
                raise _err(s.span, 'problem title given more than once')
        elif k == 'points':
            for name, _ in s.data['points']:
                if len(name) != 1:
                    raise _err(s.span, f'point names are single letters, got {name}')
                if name in declared:
                    raise _err(s.span, f'point {name} declared twice')
                declared.add(name)
        elif k in ('segment', 'angle', 'triangle'):
            ids = s.data['ids']
            _ensure_distinct(ids, s.span, NAME_LENGTHS[k])
            _ensure_declared(ids, declared, s.span)
        elif k in ('given', 'prove'):
            _validate_statement(s, declared)
            if k == 'prove':
                goals += 1
                if goals > 1:
                    raise _err(s.span, 'only one prove statement is allowed')

    if goals == 0:
        raise ValidationError('program has no prove statement')
