"""
Tests for the Go Lexer.

Verifies:
1.  Token classification (keywords vs identifiers, literals, operators).
2.  Automatic semicolon insertion at line ends.
3.  Comment handling and position tracking.
4.  Error reporting for illegal characters.
"""

import pytest

from go_gen_proxy.core.golang.tokens import GoLexer, TokenType
from go_gen_proxy.errors import GoSyntaxError


def kinds(code):
  return [(t.kind, t.value) for t in GoLexer().tokenize(code)]


def test_keywords_and_identifiers():
  toks = kinds("func Get")
  assert toks[0] == (TokenType.KEYWORD, "func")
  assert toks[1] == (TokenType.IDENT, "Get")


def test_unicode_identifier():
  toks = kinds("var größe int")
  assert toks[1] == (TokenType.IDENT, "größe")


def test_semicolon_inserted_after_identifier_line():
  toks = kinds("package lib\nvar x int\n")
  semis = [v for k, v in toks if k == TokenType.SEMICOLON]
  assert len(semis) == 2


def test_no_semicolon_after_open_brace_or_comma():
  toks = kinds("f(a,\n b)\n")
  values = [v for _, v in toks]
  assert values == ["f", "(", "a", ",", "b", ")", "\n"]


def test_semicolon_inserted_at_eof():
  toks = kinds("package lib")
  assert toks[-1][0] == TokenType.SEMICOLON


def test_string_literals():
  toks = kinds('"a\\"b" `raw\nstring`')
  assert toks[0] == (TokenType.STRING, '"a\\"b"')
  assert toks[1] == (TokenType.STRING, "`raw\nstring`")


def test_rune_and_numbers():
  toks = kinds("'x' 0x1F 1_000 3.14 1e9 2i")
  assert toks[0][0] == TokenType.RUNE
  assert [k for k, _ in toks[1:6]] == [TokenType.NUMBER] * 5


def test_multi_char_operators():
  toks = kinds("a <- b ... &^= ~")
  ops = [v for k, v in toks if k == TokenType.OPERATOR]
  assert ops == ["<-", "...", "&^=", "~"]


def test_comments_are_tokens():
  toks = kinds("// line\n/* block */ x")
  assert toks[0] == (TokenType.COMMENT, "// line")
  assert toks[1] == (TokenType.COMMENT, "/* block */")


def test_multiline_block_comment_acts_as_newline():
  toks = kinds("x /* a\nb */ y")
  assert [k for k, _ in toks] == [
    TokenType.IDENT,
    TokenType.SEMICOLON,
    TokenType.COMMENT,
    TokenType.IDENT,
    TokenType.SEMICOLON,
  ]


def test_positions_tracked():
  toks = list(GoLexer().tokenize("package lib\n\nfunc F() {}\n"))
  func = next(t for t in toks if t.is_keyword("func"))
  assert func.line == 3
  assert func.column == 1
  assert func.offset == 13


def test_end_line_of_raw_string():
  toks = list(GoLexer().tokenize("`a\nb\nc`"))
  assert toks[0].end_line == 3


def test_illegal_character():
  with pytest.raises(GoSyntaxError) as exc:
    list(GoLexer().tokenize("x := $y"))
  assert exc.value.lineno == 1
  assert exc.value.offset == 6
