from typing import Iterable, Optional, Sequence, Tuple

from .ast import Program, Stmt
from .relations import FigureRelation, RelationType

STATEMENT_FORMS = {
    RelationType.CONGRUENT: "{0} is congruent to {1}",
    RelationType.PARALLEL: "{0} is parallel to {1}",
    RelationType.PERPENDICULAR: "{0} is perpendicular to {1}",
    RelationType.BISECTS: "{0} bisects {1}",
    RelationType.SIMILAR: "{0} is similar to {1}",
    RelationType.SUPPLEMENTARY: "{0} is supplementary to {1}",
    RelationType.COMPLEMENTARY: "{0} is complementary to {1}",
    RelationType.RIGHT: "{0} is a right angle",
    RelationType.MIDPOINT: "{0} is the midpoint of {1}",
}


def format_relation(relation: FigureRelation) -> str:
    labels = [figure.label for figure in relation.figures]
    return STATEMENT_FORMS[relation.relation_type].format(*labels)


def format_traceback(steps: Iterable[Tuple[str, str]]) -> str:
    lines = []
    for idx, (statement, reason) in enumerate(steps, start=1):
        lines.append(f"{idx}. {statement} ({reason})" if reason else f"{idx}. {statement}")
    return "\n".join(lines)


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else repr(float(value))


def _point_str(name: str, loc: Optional[Tuple[float, float]]) -> str:
    if loc is None:
        return name
    return f"{name}({_format_number(loc[0])}, {_format_number(loc[1])})"


def figure_ref_str(ref: str) -> str:
    marker = ref[:1] if ref[:1] in ('^', '<') else ''
    return marker + '-'.join(ref[len(marker):])


def chain_str(ids: Sequence[str]) -> str:
    return '-'.join(ids)


def format_stmt(s: Stmt) -> str:
    k = s.kind
    if k == 'problem':
        return f'problem "{s.data["title"]}"'
    if k == 'points':
        return 'points ' + ', '.join(_point_str(name, loc) for name, loc in s.data['points'])
    if k in ('segment', 'angle', 'triangle'):
        return f"{k} {chain_str(s.data['ids'])}"
    if k in ('given', 'prove'):
        refs = ' '.join(figure_ref_str(ref) for ref in s.data['figures'])
        return f"{k} {s.data['relation']} {refs}"
    raise ValueError(f"cannot print statement kind {k!r}")


def print_program(prog: Program) -> str:
    return ''.join(format_stmt(s) + '\n' for s in prog.stmts)
