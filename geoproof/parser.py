import re
from typing import List, Optional, Tuple

from .ast import Program, Span, Stmt
from .lexer import Token, tokenize_line

_ERROR_LOC_RE = re.compile(r"\[line (\d+), col (\d+)\]")

SHAPE_KEYWORDS = ('segment', 'angle', 'triangle')
STATEMENT_KEYWORDS = ('given', 'prove')


class Cursor:
    def __init__(self, tokens: List[Token]):
        self.toks = tokens
        self.i = 0

    def peek(self):
        return self.toks[self.i] if self.i < len(self.toks) else None

    def peek_keyword(self):
        t = self.peek()
        if not t or t[0] != 'ID':
            return None
        return t[1].lower()

    def consume_keyword(self, keyword: str):
        tok = self.expect('ID')
        if tok[1].lower() != keyword:
            raise SyntaxError(
                f"[line {tok[2]}, col {tok[3]}] expected keyword '{keyword}', got '{tok[1]}'"
            )
        return tok

    def match(self, *types: str):
        if self.i < len(self.toks) and self.toks[self.i][0] in types:
            t = self.toks[self.i]
            self.i += 1
            return t
        return None

    def expect(self, *types: str):
        t = self.peek()
        if t and t[0] in types:
            self.i += 1
            return t
        want = '|'.join(types)
        if t:
            raise SyntaxError(f'[line {t[2]}, col {t[3]}] expected {want}, got {t[0]}')
        raise SyntaxError(f'Unexpected end of line: expected {want}')


def parse_id(cur: Cursor):
    t = cur.expect('ID')
    return t[1].upper(), Span(t[2], t[3])


def parse_idchain(cur: Cursor):
    """``A-B-C`` or compact ``ABC``; a single id is allowed."""
    first, sp = parse_id(cur)
    ids = list(first)
    while cur.match('DASH'):
        nxt, _ = parse_id(cur)
        ids.extend(nxt)
    return ids, sp


def parse_signed_number(cur: Cursor) -> float:
    negative = cur.match('DASH') is not None
    value = float(cur.expect('NUMBER')[1])
    return -value if negative else value


def parse_point_decl(cur: Cursor):
    name, sp = parse_id(cur)
    loc = None
    if cur.match('LPAREN'):
        x = parse_signed_number(cur)
        cur.expect('COMMA')
        y = parse_signed_number(cur)
        cur.expect('RPAREN')
        loc = (x, y)
    return name, loc, sp


def parse_figure_ref(cur: Cursor) -> Tuple[str, Span]:
    marker = cur.match('TRIANGLE', 'ANGLE')
    ids, sp = parse_idchain(cur)
    if marker:
        sp = Span(marker[2], marker[3])
    prefix = '' if not marker else ('^' if marker[0] == 'TRIANGLE' else '<')
    return prefix + ''.join(ids), sp


def parse_stmt(tokens: List[Token]) -> Optional[Stmt]:
    if not tokens:
        return None
    cur = Cursor(tokens)
    t0 = cur.peek()
    kw = cur.peek_keyword()
    if not kw:
        raise SyntaxError(f'[line {t0[2]}, col {t0[3]}] expected statement keyword')

    stmt: Stmt

    if kw == 'problem':
        cur.consume_keyword('problem')
        s = cur.expect('STRING')
        stmt = Stmt('problem', Span(s[2], s[3]), {'title': s[1]})
    elif kw == 'points':
        cur.consume_keyword('points')
        points = []
        while True:
            name, loc, _ = parse_point_decl(cur)
            points.append((name, loc))
            if not cur.match('COMMA'):
                break
        stmt = Stmt('points', Span(t0[2], t0[3]), {'points': points})
    elif kw in SHAPE_KEYWORDS:
        cur.consume_keyword(kw)
        ids, sp = parse_idchain(cur)
        stmt = Stmt(kw, sp, {'ids': ids})
    elif kw in STATEMENT_KEYWORDS:
        cur.consume_keyword(kw)
        rel = cur.expect('ID')
        figures = []
        while cur.peek():
            if figures:
                cur.match('COMMA')
            ref, _ = parse_figure_ref(cur)
            figures.append(ref)
        if not figures:
            raise SyntaxError(f'[line {rel[2]}, col {rel[3]}] expected figure after {rel[1]!r}')
        stmt = Stmt(kw, Span(t0[2], t0[3]), {'relation': rel[1].lower(), 'figures': figures})
    else:
        raise SyntaxError(f'[line {t0[2]}, col {t0[3]}] unknown statement {t0[1]!r}')

    trailing = cur.peek()
    if trailing:
        raise SyntaxError(f"[line {trailing[2]}, col {trailing[3]}] unexpected token {trailing[1]!r}")
    return stmt


def _augment_syntax_error(err: SyntaxError, line_text: str) -> Optional[SyntaxError]:
    message = str(err)
    if not line_text or "\n" in message:
        return None
    match = _ERROR_LOC_RE.search(message)
    if not match:
        return None
    col = max(int(match.group(2)), 1)
    caret_line = " " * (col - 1) + "^"
    snippet = f"    {line_text.rstrip()}\n    {caret_line}"
    return SyntaxError(f"{message}\n{snippet}")


def parse_program(text: str) -> Program:
    prog = Program()
    for i, raw in enumerate(text.splitlines(), start=1):
        try:
            tokens = tokenize_line(raw, i)
            if not tokens:
                continue
            stmt = parse_stmt(tokens)
        except SyntaxError as err:
            augmented = _augment_syntax_error(err, raw)
            if augmented is None:
                raise
            raise augmented from None
        if stmt:
            prog.stmts.append(stmt)
    return prog
