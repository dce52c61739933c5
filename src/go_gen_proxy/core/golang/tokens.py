"""
Go Tokenizer Definition.

Provides a Regex-based Lexer (`GoLexer`) that decomposes Go source into a stream
of typed `Token` objects. The lexer performs Go's automatic semicolon insertion,
so the parser can treat line ends that terminate statements as explicit
`SEMICOLON` tokens (with value ``"\\n"``).
"""

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Generator, List, Optional, Tuple

from go_gen_proxy.errors import GoSyntaxError


class TokenType(Enum):
  """Enumeration of Go token types."""

  COMMENT = auto()  # // line or /* block */
  IDENT = auto()  # foo, Bar, _
  KEYWORD = auto()  # func, var, type, ...
  NUMBER = auto()  # 42, 0x1F, 1.5e3, 2i
  STRING = auto()  # "interpreted" or `raw`
  RUNE = auto()  # 'a', '\n'
  OPERATOR = auto()  # + - ... ( ) [ ] { } , . :
  SEMICOLON = auto()  # ; (explicit or inserted at a line end)


KEYWORDS = frozenset(
  {
    "break",
    "case",
    "chan",
    "const",
    "continue",
    "default",
    "defer",
    "else",
    "fallthrough",
    "for",
    "func",
    "go",
    "goto",
    "if",
    "import",
    "interface",
    "map",
    "package",
    "range",
    "return",
    "select",
    "struct",
    "switch",
    "type",
    "var",
  }
)

# Keywords after which a newline terminates the statement.
_TERMINATING_KEYWORDS = frozenset({"break", "continue", "fallthrough", "return"})
_TERMINATING_OPERATORS = frozenset({"++", "--", ")", "]", "}"})


@dataclass
class Token:
  """
  Represents a lexical unit.

  Attributes:
      kind (TokenType): The type of token.
      value (str): The raw string content.
      line (int): Line number in source (1-based).
      column (int): Column number in source (1-based).
      offset (int): Character offset of the first character in the source.
  """

  kind: TokenType
  value: str
  line: int
  column: int
  offset: int = 0

  @property
  def end_line(self) -> int:
    """Line on which the token ends (differs from `line` for block comments and raw strings)."""
    return self.line + self.value.count("\n")

  @property
  def end_offset(self) -> int:
    return self.offset + len(self.value)

  def is_op(self, value: str) -> bool:
    return self.kind == TokenType.OPERATOR and self.value == value

  def is_keyword(self, value: str) -> bool:
    return self.kind == TokenType.KEYWORD and self.value == value


class GoLexer:
  """
  Regex-based Lexer for Go source files.
  """

  # Compiled Regex Patterns (Order matters for priority)
  PATTERNS: List[Tuple[TokenType, str]] = [
    (TokenType.COMMENT, r"//[^\n]*"),
    (TokenType.COMMENT, r"/\*.*?\*/"),
    (TokenType.STRING, r"`[^`]*`"),
    (TokenType.STRING, r'"(?:\\.|[^\\"\n])*"'),
    (TokenType.RUNE, r"'(?:\\.|[^\\'\n])+'"),
    # Numbers (hex/octal/binary, decimals, floats, imaginary suffix)
    (TokenType.NUMBER, r"0[xX][0-9a-fA-F_]*(?:\.[0-9a-fA-F_]*)?(?:[pP][-+]?[0-9_]+)?i?"),
    (TokenType.NUMBER, r"0[bBoO][0-9_]+i?"),
    (TokenType.NUMBER, r"(?:[0-9][0-9_]*(?:\.[0-9_]*)?|\.[0-9][0-9_]*)(?:[eE][-+]?[0-9_]+)?i?"),
    (TokenType.IDENT, r"[^\W\d]\w*"),
    (
      TokenType.OPERATOR,
      r"<<=|>>=|&\^=|\.\.\.|&&|\|\||<-|\+\+|--|==|!=|<=|>=|:=|\+=|-=|\*=|/=|%=|&=|\|=|\^=|<<|>>|&\^"
      r"|[-+*/%&|^<>=!~()\[\]{},.:]",
    ),
  ]

  def __init__(self) -> None:
    """Initializes the lexer with compiled patterns."""
    self.regex_pairs = [(kind, re.compile(pattern, re.DOTALL)) for kind, pattern in self.PATTERNS]
    self._ws = re.compile(r"[ \t\r\f\ufeff]+")

  def tokenize(self, text: str) -> Generator[Token, None, None]:
    """
    Tokenizes the input string.

    Args:
        text (str): Raw Go source code.

    Yields:
        Token: Token objects, including comments and inserted semicolons.

    Raises:
        GoSyntaxError: If an unrecognized character sequence is encountered.
    """
    pos = 0
    line_num = 1
    line_start = 0
    length = len(text)
    last: Optional[Token] = None

    while pos < length:
      match_ws = self._ws.match(text, pos)
      if match_ws:
        pos = match_ws.end()
        continue

      if text[pos] == "\n":
        if self._needs_semicolon(last):
          last = Token(TokenType.SEMICOLON, "\n", line_num, pos - line_start + 1, pos)
          yield last
        pos += 1
        line_num += 1
        line_start = pos
        continue

      if text[pos] == ";":
        last = Token(TokenType.SEMICOLON, ";", line_num, pos - line_start + 1, pos)
        yield last
        pos += 1
        continue

      match_found = False
      for kind, regex in self.regex_pairs:
        match = regex.match(text, pos)
        if not match:
          continue
        val = match.group(0)
        column = pos - line_start + 1

        if kind == TokenType.IDENT and val in KEYWORDS:
          kind = TokenType.KEYWORD

        newlines = val.count("\n")
        if kind == TokenType.COMMENT and newlines and self._needs_semicolon(last):
          # A multi-line block comment acts like a newline.
          last = Token(TokenType.SEMICOLON, "\n", line_num, column, pos)
          yield last

        token = Token(kind, val, line_num, column, pos)
        yield token
        if kind != TokenType.COMMENT:
          last = token

        if newlines:
          line_num += newlines
          line_start = pos + val.rfind("\n") + 1
        pos += len(val)
        match_found = True
        break

      if not match_found:
        snippet = text[pos : min(pos + 10, length)]
        raise GoSyntaxError(f"illegal character '{snippet}...'", line_num, pos - line_start + 1)

    if self._needs_semicolon(last):
      yield Token(TokenType.SEMICOLON, "\n", line_num, pos - line_start + 1, pos)

  @staticmethod
  def _needs_semicolon(last: Optional[Token]) -> bool:
    if last is None:
      return False
    if last.kind in (TokenType.IDENT, TokenType.NUMBER, TokenType.STRING, TokenType.RUNE):
      return True
    if last.kind == TokenType.KEYWORD:
      return last.value in _TERMINATING_KEYWORDS
    if last.kind == TokenType.OPERATOR:
      return last.value in _TERMINATING_OPERATORS
    return False
