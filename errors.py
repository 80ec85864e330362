class SpellError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class SpellLexError(SpellError):
    def __init__(self, message: str, pos: int | None = None, line: int | None = None, column: int | None = None):
        super().__init__(message)
        self.pos = pos
        self.line = line
        self.column = column

    def __str__(self) -> str:
        if self.line is None:
            return f"Lex error: {self.message}"
        return f"Lex error: {self.message} at line {self.line}, col {self.column}"


class SpellParseError(SpellError):
    def __init__(self, message: str, token=None, pos: int | None = None):
        super().__init__(message)
        self.token = token  # offending token (may be EOF)
        self.pos = pos      # cursor index into the token list

    def __str__(self) -> str:
        tok = self.token
        if tok is None:
            return f"Parse error: {self.message}"
        return f"Parse error: {self.message} at line {tok.line}, col {tok.column}"


class SpellRuntimeError(SpellError):
    def __str__(self) -> str:
        return self.message


class SpellNameError(SpellRuntimeError):
    pass


class SpellTypeError(SpellRuntimeError):
    pass


class SpellArithmeticError(SpellRuntimeError):
    pass
