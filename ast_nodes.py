class ASTNode:
    # Kind tag (STRING, CREATE, WHILE, ...). Subclasses override.
    kind = None
    # Optional source line (1-based). Parser sets this.
    line: int | None = None


class Program(ASTNode):
    def __init__(self, statements):
        self.statements = statements

    def __len__(self):
        return len(self.statements)

    def __iter__(self):
        return iter(self.statements)


class Literal(ASTNode):
    def __init__(self, value, kind):
        self.value = value
        self.kind = kind  # STRING, INTEGER or FLOAT


class Var(ASTNode):
    kind = "IDENTIFIER"

    def __init__(self, name):
        self.name = name


class Create(ASTNode):
    kind = "CREATE"

    def __init__(self, name, value):
        self.name = name    # Var node
        self.value = value  # expression


class Set(ASTNode):
    kind = "SET"

    def __init__(self, name, value):
        self.name = name    # Var node
        self.value = value  # expression


class Print(ASTNode):
    kind = "PRINT"

    def __init__(self, value):
        self.value = value


BINARY_KINDS = {
    "+": "ADD",
    "-": "SUBTRACT",
    "*": "MULTIPLY",
    "/": "DIVIDE",
    "==": "EQUAL",
    "!=": "NOTEQUAL",
    ">": "GREATER",
    "<": "LESS",
}


class Binary(ASTNode):
    def __init__(self, left, op, right):
        self.left = left
        self.op = op
        self.right = right

    @property
    def kind(self):
        return BINARY_KINDS[self.op]


class Unary(ASTNode):
    def __init__(self, op, expr):
        self.op = op  # "ord" or "chr"
        self.expr = expr

    @property
    def kind(self):
        return self.op.upper()


class Input(ASTNode):
    kind = "INPUT"


class Block(ASTNode):
    def __init__(self, statements):
        self.statements = statements


class If(ASTNode):
    kind = "IF"

    def __init__(self, condition, then_block, else_block=None):
        self.condition = condition
        self.then_block = then_block
        self.else_block = else_block


class While(ASTNode):
    kind = "WHILE"

    def __init__(self, condition, body):
        self.condition = condition
        self.body = body
