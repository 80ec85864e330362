from errors import SpellLexError

SYMBOLS = "{}()[]=;.,:+-*/"


class Token:
    def __init__(self, type, value=None, line=1, column=1, pos=0):
        self.type = type
        self.value = value
        self.line = line
        self.column = column
        self.pos = pos

    def describe(self):
        if self.value is not None:
            return f"{self.type}:'{self.value}'"
        return self.type

    def __repr__(self):
        if self.value is not None:
            return f"{self.type}({self.value})"
        return f"{self.type}"


def is_alpha(ch):
    return ch is not None and ch.isascii() and (ch.isalpha() or ch == "_")


def is_digit(ch):
    return ch is not None and ch.isascii() and ch.isdigit()


class Lexer:
    def __init__(self, text):
        self.text = text
        self.pos = 0
        self.current_char = text[0] if text else None
        self.line = 1
        self.column = 1

    def advance(self):
        # track line/column based on current_char before moving
        if self.current_char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.pos += 1
        if self.pos >= len(self.text):
            self.current_char = None
        else:
            self.current_char = self.text[self.pos]

    def peek(self):
        nxt = self.pos + 1
        if nxt >= len(self.text):
            return None
        return self.text[nxt]

    # newlines are plain whitespace here: statements are keyword-led, not line-led
    def skip_whitespace(self):
        while self.current_char is not None and self.current_char.isspace():
            self.advance()

    def skip_comment(self):
        while self.current_char is not None and self.current_char != "\n":
            self.advance()

    def read_identifier(self):
        start = (self.line, self.column, self.pos)
        result = ""
        while is_alpha(self.current_char) or is_digit(self.current_char):
            result += self.current_char
            self.advance()
        # keywords are not special here; the parser matches them by value
        return Token("IDENTIFIER", result, *start)

    def read_number(self):
        start = (self.line, self.column, self.pos)
        result = ""
        while is_digit(self.current_char):
            result += self.current_char
            self.advance()

        # a dot only belongs to the number when a digit follows it
        if self.current_char == "." and is_digit(self.peek()):
            result += "."
            self.advance()
            while is_digit(self.current_char):
                result += self.current_char
                self.advance()
            return Token("FLOAT", result, *start)

        return Token("INTEGER", result, *start)

    def read_string(self):
        start_line, start_col, start_pos = self.line, self.column, self.pos
        quote = self.current_char  # ' or "
        self.advance()  # skip opening quote
        result = ""

        # no escape processing: content is taken verbatim
        while self.current_char is not None and self.current_char != quote:
            result += self.current_char
            self.advance()

        if self.current_char != quote:
            raise SpellLexError("unterminated string", start_pos, start_line, start_col)

        self.advance()  # skip closing quote
        return Token("STRING", result, start_line, start_col, start_pos)

    def get_next_token(self):
        while self.current_char is not None:

            if self.current_char.isspace():
                self.skip_whitespace()
                continue

            # comments
            if self.current_char == "#":
                self.skip_comment()
                continue

            if self.current_char in "\"'":
                return self.read_string()

            if is_digit(self.current_char):
                return self.read_number()

            if is_alpha(self.current_char):
                return self.read_identifier()

            if self.current_char in SYMBOLS:
                tok = Token("SYMBOL", self.current_char, self.line, self.column, self.pos)
                self.advance()
                return tok

            raise SpellLexError(f"unexpected character '{self.current_char}'", self.pos, self.line, self.column)

        return Token("EOF", line=self.line, column=self.column, pos=self.pos)

    def tokenize(self):
        tokens = []
        while True:
            tok = self.get_next_token()
            tokens.append(tok)
            if tok.type == "EOF":
                return tokens


def tokenize(source):
    return Lexer(source).tokenize()
