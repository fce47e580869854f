"""Line tokenizer for problem files."""

import re
from typing import List, Tuple

Token = Tuple[str, str, int, int]  # (type, value, line, col)

MARKERS = {
    '^': 'TRIANGLE',
    'Δ': 'TRIANGLE',
    '<': 'ANGLE',
    '∠': 'ANGLE',
}

PUNCTUATION = {
    '(': 'LPAREN',
    ')': 'RPAREN',
    ',': 'COMMA',
    '-': 'DASH',
}

_TOKEN_RE = re.compile(
    r'''
    (?P<SKIP>[ \t\r]+)
  | (?P<COMMENT>\#.*)
  | (?P<STRING>"(?:[^"\\]|\\.)*")
  | (?P<OPEN_STRING>")
  | (?P<NUMBER>(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)
  | (?P<ID>[A-Za-z][A-Za-z0-9_]*)
  | (?P<SYMBOL>[()\-,^<Δ∠])
    ''',
    re.VERBOSE,
)

_ESCAPE_RE = re.compile(r'\\(.)')
_ESCAPES = {'n': '\n', 't': '\t'}


def _unescape(body: str) -> str:
    return _ESCAPE_RE.sub(lambda m: _ESCAPES.get(m.group(1), m.group(1)), body)


def tokenize_line(s: str, line_no: int) -> List[Token]:
    tokens: List[Token] = []
    pos = 0
    while pos < len(s):
        m = _TOKEN_RE.match(s, pos)
        col = pos + 1
        if m is None:
            raise SyntaxError(f'[line {line_no}, col {col}] unexpected character: {s[pos]!r}')
        kind = m.lastgroup
        text = m.group(0)
        pos = m.end()
        if kind == 'COMMENT':
            break
        if kind == 'SKIP':
            continue
        if kind == 'OPEN_STRING':
            raise SyntaxError(f'[line {line_no}, col {col}] unterminated string literal')
        if kind == 'STRING':
            tokens.append(('STRING', _unescape(text[1:-1]), line_no, col))
        elif kind == 'SYMBOL':
            tokens.append((MARKERS.get(text) or PUNCTUATION[text], text, line_no, col))
        else:
            tokens.append((kind, text, line_no, col))
    return tokens
