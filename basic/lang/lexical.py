"""Lexical analysis for the basic language: turns source text into a flat list of Tokens. The lexer does no syntax
checking, it only detects characters that cannot start any token.

Tokens can be loosely defined as follows:

```
<int>        ::= <digit>+
<float>      ::= <digit>* "." <digit>*        ; a second "." ends the literal
<string>     ::= '"' (<char> | "\\" <char>)* '"'
<identifier> ::= (<letter> | "_") (<letter> | <digit> | "_")*   ; keywords are identifiers from KEYWORDS
<operator>   ::= "+" | "-" | "*" | "/" | "**" | "=" | "==" | "!=" | "!" | "<" | ">" | "<=" | ">="
               | "&&" | "||" | "->" | "(" | ")" | "[" | "]" | ","
<comment>    ::= "#" <char>*                  ; runs to end of line, skipped
```
"""

import string

from basic.lang.error import ExpectedCharError, IllegalCharError


DIGITS = "0123456789"
LETTERS = string.ascii_letters + "_"
LETTERS_DIGITS = LETTERS + DIGITS
WHITESPACE = " \t\n"

TT_INT = "INT"
TT_FLOAT = "FLOAT"
TT_STRING = "STRING"
TT_IDENTIFIER = "IDENTIFIER"
TT_KEYWORD = "KEYWORD"
TT_PLUS = "PLUS"          # +
TT_MINUS = "MINUS"        # -
TT_MUL = "MUL"            # *
TT_DIV = "DIV"            # /
TT_POW = "POW"            # **
TT_EQ = "EQ"              # =
TT_LPAREN = "LPAREN"      # (
TT_RPAREN = "RPAREN"      # )
TT_LSQUARE = "LSQUARE"    # [
TT_RSQUARE = "RSQUARE"    # ]
TT_EE = "EE"              # ==
TT_NE = "NE"              # !=
TT_LT = "LT"              # <
TT_GT = "GT"              # >
TT_LTE = "LTE"            # <=
TT_GTE = "GTE"            # >=
TT_COMMA = "COMMA"        # ,
TT_ARROW = "ARROW"        # ->
TT_EOF = "EOF"

# "&&", "||" and "!" are lexed as keywords so the parser treats them like "and"/"or"/"not"
KEYWORDS = ["var", "&&", "||", "!", "if", "then", "elif", "else", "for", "to", "step", "while", "fun"]

SINGLE_CHARS = {
    "+": TT_PLUS,
    "/": TT_DIV,
    "(": TT_LPAREN,
    ")": TT_RPAREN,
    "[": TT_LSQUARE,
    "]": TT_RSQUARE,
    ",": TT_COMMA,
}

# first char: (token if alone, second char, token if followed by second char)
DOUBLE_CHARS = {
    "-": (TT_MINUS, ">", TT_ARROW),
    "*": (TT_MUL, "*", TT_POW),
    "=": (TT_EQ, "=", TT_EE),
    "<": (TT_LT, "=", TT_LTE),
    ">": (TT_GT, "=", TT_GTE),
}

ESCAPE_CHARS = {"n": "\n", "t": "\t"}


class Position:
    """Cursor into a source text. Tokens, nodes and values hold copies of it, never the lexer's live cursor."""

    def __init__(self, index, row, col, source_name, source_text):
        self.index = index
        self.row = row
        self.col = col
        self.source_name = source_name
        self.source_text = source_text

    def advance(self, current_char=None):
        self.index += 1
        self.col += 1

        if current_char == "\n":
            self.row += 1
            self.col = 0

        return self

    def copy(self):
        return Position(self.index, self.row, self.col, self.source_name, self.source_text)

    def __repr__(self):
        return f"Position({self.source_name}, row={self.row}, col={self.col})"


class Token:

    def __init__(self, kind, value=None, pos_start=None, pos_end=None):
        self.kind = kind
        self.value = value

        if pos_start is not None:
            self.pos_start = pos_start.copy()
            self.pos_end = pos_start.copy().advance()
        if pos_end is not None:
            self.pos_end = pos_end.copy()

    def matches(self, kind, value):
        return self.kind == kind and self.value == value

    def __repr__(self):
        if self.value is not None:
            return f"{self.kind}:{self.value}"
        return self.kind


class Lexer:
    """Single forward scan over the source text, one character of lookahead."""

    def __init__(self, source_name, text):
        self.source_name = source_name
        self.text = text
        self.pos = Position(-1, 0, -1, source_name, text)
        self.current_char = None
        self.advance()

    def advance(self):
        self.pos.advance(self.current_char)
        self.current_char = self.text[self.pos.index] if self.pos.index < len(self.text) else None

    def make_tokens(self):
        """Returns the list of tokens in self.text, terminated by a single EOF token. Raises IllegalCharError at the
        first character that cannot start a token.
        """
        tokens = []

        while self.current_char is not None:
            if self.current_char in WHITESPACE:
                self.advance()
            elif self.current_char == "#":
                self.skip_comment()
            elif self.current_char in DIGITS + ".":
                tokens.append(self.make_number())
            elif self.current_char in LETTERS:
                tokens.append(self.make_identifier())
            elif self.current_char == '"':
                tokens.append(self.make_string())
            elif self.current_char in SINGLE_CHARS:
                tokens.append(Token(SINGLE_CHARS[self.current_char], pos_start=self.pos))
                self.advance()
            elif self.current_char in DOUBLE_CHARS:
                tokens.append(self.make_double(*DOUBLE_CHARS[self.current_char]))
            elif self.current_char == "!":
                tokens.append(self.make_not_equals())
            elif self.current_char in "&|":
                tokens.append(self.make_logical())
            else:
                pos_start = self.pos.copy()
                char = self.current_char
                self.advance()
                raise IllegalCharError(pos_start, self.pos, char)

        tokens.append(Token(TT_EOF, pos_start=self.pos))
        return tokens

    def skip_comment(self):
        while self.current_char is not None and self.current_char != "\n":
            self.advance()

    def make_number(self):
        num_str = ""
        dot_count = 0
        pos_start = self.pos.copy()

        while self.current_char is not None and self.current_char in DIGITS + ".":
            if self.current_char == ".":
                if dot_count == 1:
                    break
                dot_count += 1
            num_str += self.current_char
            self.advance()

        if num_str == ".":
            raise IllegalCharError(pos_start, self.pos, ".")
        return Token(TT_FLOAT if dot_count else TT_INT, num_str, pos_start, self.pos)

    def make_identifier(self):
        id_str = ""
        pos_start = self.pos.copy()

        while self.current_char is not None and self.current_char in LETTERS_DIGITS:
            id_str += self.current_char
            self.advance()

        kind = TT_KEYWORD if id_str in KEYWORDS else TT_IDENTIFIER
        return Token(kind, id_str, pos_start, self.pos)

    def make_string(self):
        """Unterminated strings run to the end of the input without raising."""
        result = ""
        pos_start = self.pos.copy()
        escape_character = False
        self.advance()

        while self.current_char is not None and (self.current_char != '"' or escape_character):
            if escape_character:
                result += ESCAPE_CHARS.get(self.current_char, self.current_char)
                escape_character = False
            elif self.current_char == "\\":
                escape_character = True
            else:
                result += self.current_char
            self.advance()

        if self.current_char == '"':
            self.advance()
        return Token(TT_STRING, result, pos_start, self.pos)

    def make_double(self, single_kind, second_char, double_kind):
        pos_start = self.pos.copy()
        kind = single_kind
        self.advance()

        if self.current_char == second_char:
            self.advance()
            kind = double_kind

        return Token(kind, pos_start=pos_start, pos_end=self.pos)

    def make_not_equals(self):
        pos_start = self.pos.copy()
        self.advance()

        if self.current_char == "=":
            self.advance()
            return Token(TT_NE, pos_start=pos_start, pos_end=self.pos)
        return Token(TT_KEYWORD, "!", pos_start, self.pos)

    def make_logical(self):
        """'&&' or '||'. There is no single-character form of either."""
        pos_start = self.pos.copy()
        char = self.current_char
        self.advance()

        if self.current_char != char:
            raise ExpectedCharError(pos_start, self.pos, char * 2)

        self.advance()
        return Token(TT_KEYWORD, char * 2, pos_start, self.pos)