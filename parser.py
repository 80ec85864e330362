from ast_nodes import (
    Program, Literal, Var, Create, Set, Print, Binary, Unary, Input, Block, If, While,
)
from errors import SpellParseError


class Parser:
    def __init__(self, tokens, lenient: bool = False):
        self.tokens = tokens
        self.pos = 0
        self.current_token = self.tokens[0]
        self.block_depth = 0
        # lenient: an unrecognized statement at top level ends the program quietly
        self.lenient = lenient

        # leading keyword -> rule
        self.statement_rules = {
            "shout": self.print_statement,
            "create": self.create_statement,
            "set": self.set_statement,
            "cast": self.if_statement,
            "whilst": self.while_statement,
        }
        self.expression_rules = {
            "combine": self.combine_expr,
            "remove": self.remove_expr,
            "duplicate": self.duplicate_expr,
            "split": self.split_expr,
            "find": self.input_expr,
            "may": self.ord_expr,
            "get": self.chr_expr,
            "is": self.comparison_expr,
        }

    # ---------- CURSOR ----------
    def is_at_end(self):
        return self.current_token.type == "EOF"

    def peek(self):
        return self.current_token

    def advance(self):
        tok = self.current_token
        if not self.is_at_end():
            self.pos += 1
            self.current_token = self.tokens[self.pos]
        return tok

    def check(self, token_type):
        return self.current_token.type == token_type

    def check_value(self, value):
        return self.current_token.type == "IDENTIFIER" and self.current_token.value == value

    def error_here(self, message):
        raise SpellParseError(message, self.current_token, self.pos)

    # move to next token, but only if it matches what we expect
    def eat(self, token_type):
        if not self.check(token_type):
            self.error_here(f"Expected {token_type}, got {self.current_token.describe()}")
        return self.advance()

    def eat_ident_value(self, expected_value):
        if not self.check_value(expected_value):
            self.error_here(f"Expected keyword '{expected_value}', got {self.current_token.describe()}")
        return self.advance()

    def eat_keywords(self, phrase):
        # multi-word phrases like "with the power of" carry no meaning of their own
        for word in phrase.split():
            self.eat_ident_value(word)

    # ---------- TOP LEVEL ----------
    def parse(self):
        statements = []
        try:
            while not self.is_at_end():
                stmt = self.statement()
                if stmt is None:
                    break
                statements.append(stmt)
        except RecursionError:
            raise SpellParseError("spell nested too deeply", self.current_token, self.pos) from None
        return Program(statements)

    # ---------- STATEMENTS ----------
    def statement(self):
        tok = self.current_token
        rule = self.statement_rules.get(tok.value) if tok.type == "IDENTIFIER" else None
        if rule is None:
            if self.lenient and self.block_depth == 0:
                return None
            self.error_here(f"Unexpected token in statement: {tok.describe()}")

        node = rule()
        node.line = tok.line
        return node

    def print_statement(self):
        self.eat_keywords("shout the many cries of")
        return Print(self.expression())

    def spell_name(self, after):
        if not self.check("IDENTIFIER"):
            self.error_here(f"Expected identifier for spell name after '{after}'")
        # parsed as an expression; the interpreter rejects anything but a plain name
        return self.expression()

    def create_statement(self):
        self.eat_keywords("create a new spell named")
        name = self.spell_name("named")
        self.eat_keywords("with the power of")
        return Create(name, self.expression())

    def set_statement(self):
        self.eat_keywords("set the power of")
        name = self.spell_name("of")
        self.eat_keywords("to")
        return Set(name, self.expression())

    def if_statement(self):
        # cast only if the spell <expr> is true do ... [else do ...] done
        self.eat_keywords("cast only if the spell")
        condition = self.expression()
        self.eat_keywords("is true")
        then_block = self.block()

        else_block = None
        if self.check_value("else"):
            self.advance()
            else_block = self.block()

        self.eat_ident_value("done")
        return If(condition, then_block, else_block)

    def while_statement(self):
        self.eat_keywords("whilst the spell")
        condition = self.expression()
        self.eat_keywords("is true")
        body = self.block()
        self.eat_ident_value("done")
        return While(condition, body)

    def block(self):
        # the closing 'done'/'else' is left for the caller
        tok = self.eat_ident_value("do")
        self.block_depth += 1
        statements = []
        while not self.is_at_end() and not self.check_value("done") and not self.check_value("else"):
            statements.append(self.statement())
        self.block_depth -= 1

        node = Block(statements)
        node.line = tok.line
        return node

    # ---------- EXPRESSIONS ----------
    # No precedence ladder: every compound form is bracketed by its keywords.
    def expression(self):
        tok = self.current_token

        if tok.type == "STRING":
            self.advance()
            node = Literal(tok.value, "STRING")
        elif tok.type == "INTEGER":
            self.advance()
            node = Literal(int(tok.value), "INTEGER")
        elif tok.type == "FLOAT":
            self.advance()
            node = Literal(float(tok.value), "FLOAT")
        elif tok.type == "IDENTIFIER":
            rule = self.expression_rules.get(tok.value)
            if rule is not None:
                self.advance()
                node = rule()
            else:
                self.advance()
                node = Var(tok.value)
        else:
            self.error_here(f"Unexpected token in expression: {tok.describe()}")

        node.line = tok.line
        return node

    def combine_expr(self):
        # combine the power of A and B -> A + B
        self.eat_keywords("the power of")
        left = self.expression()
        self.eat_keywords("and")
        right = self.expression()
        return Binary(left, "+", right)

    def remove_expr(self):
        # remove the power of A from B -> B - A
        self.eat_keywords("the power of")
        right = self.expression()
        self.eat_keywords("from")
        left = self.expression()
        return Binary(left, "-", right)

    def duplicate_expr(self):
        # duplicate the power of A B times -> A * B
        self.eat_keywords("the power of")
        left = self.expression()
        right = self.expression()
        self.eat_keywords("times")
        return Binary(left, "*", right)

    def split_expr(self):
        # split the power of A B times -> A / B
        self.eat_keywords("the power of")
        left = self.expression()
        right = self.expression()
        self.eat_keywords("times")
        return Binary(left, "/", right)

    def input_expr(self):
        self.eat_keywords("the source of the messages")
        return Input()

    def ord_expr(self):
        self.eat_keywords("the sorcerers cast their spells on")
        return Unary("ord", self.expression())

    def chr_expr(self):
        self.eat_keywords("the character from the spell")
        return Unary("chr", self.expression())

    def comparison_expr(self):
        # is A equal to B | is A not equal to B | is A greater than B | is A less than B
        left = self.expression()

        if self.check_value("equal"):
            self.advance()
            self.eat_keywords("to")
            op = "=="
        elif self.check_value("not"):
            self.advance()
            self.eat_keywords("equal to")
            op = "!="
        elif self.check_value("greater"):
            self.advance()
            self.eat_keywords("than")
            op = ">"
        elif self.check_value("less"):
            self.advance()
            self.eat_keywords("than")
            op = "<"
        else:
            self.error_here(f"Unexpected token after 'is': {self.current_token.describe()}")

        return Binary(left, op, self.expression())


def parse(tokens, lenient: bool = False):
    return Parser(tokens, lenient=lenient).parse()
