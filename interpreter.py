import math
import re

from ast_nodes import Literal, Var, Create, Set, Print, Binary, Unary, Input, If, While
from environment import Environment
from errors import SpellRuntimeError, SpellTypeError, SpellArithmeticError
from lexer import tokenize
from parser import parse

INPUT_PROMPT = "Enter the source of the messages:"

# plain ASCII decimal text only: no underscores, no other scripts' digits
INTEGER_TEXT = re.compile(r"[+-]?[0-9]+\Z", re.ASCII)
FLOAT_TEXT = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?\Z", re.ASCII)


def default_output(message, severity="log"):
    print(message)


def default_input(prompt):
    try:
        return input(prompt)
    except EOFError:
        return ""


# ---------- VALUES ----------
def is_number(value) -> bool:
    # bools take part in arithmetic as 0/1
    return isinstance(value, (int, float))


def type_name(value) -> str:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "float"
    if isinstance(value, str):
        return "string"
    if value is None:
        return "nothing"
    return type(value).__name__


def format_value(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
    if value is None:
        return "null"
    return str(value)


def is_truthy(value) -> bool:
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)


def strict_equals(left, right) -> bool:
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    if is_number(left) and is_number(right):
        return left == right
    if isinstance(left, str) and isinstance(right, str):
        return left == right
    return False


def coerce_input(text):
    """Turns a line of user input into a number when it reads as one.

    Only plain ASCII decimal text converts. Anything else, blank text and
    "nan" included, is kept as the raw string. A missing reply counts as an
    empty string.
    """
    if text is None:
        return ""
    stripped = text.strip()
    if INTEGER_TEXT.match(stripped):
        return int(stripped)
    if FLOAT_TEXT.match(stripped):
        return float(stripped)
    return text


class Interpreter:
    def __init__(self, program, output_fn=None, input_fn=None, max_steps: int | None = None):
        self.program = program
        self.output_fn = output_fn or default_output
        self.input_fn = input_fn or default_input
        self.max_steps = max_steps  # set to an int to guard against infinite loops
        self.steps = 0
        self.global_env = Environment()

    def run(self, env=None) -> bool:
        """Executes the program; a failure is reported once through output_fn and stops the run."""
        self.global_env = env if env is not None else Environment()
        self.steps = 0
        try:
            for statement in self.program:
                self.execute(statement, self.global_env)
        except RecursionError:
            self.output_fn("Runtime Error: spell nested too deeply (maximum recursion depth exceeded)", "error")
            return False
        except Exception as e:
            self.output_fn(f"Runtime Error: {e}", "error")
            return False
        return True

    def tick(self):
        # one step per statement and per loop pass
        if self.max_steps is None:
            return
        self.steps += 1
        if self.steps > self.max_steps:
            raise SpellRuntimeError("Step limit exceeded (possible infinite loop)")

    def execute(self, statement, env):
        self.tick()
        self.evaluate(statement, env)

    def execute_block(self, block, parent_env):
        # fresh scope per entry, so loop passes never share block-local spells
        block_env = parent_env.create_child()
        for statement in block.statements:
            self.execute(statement, block_env)

    def evaluate(self, node, env):
        if isinstance(node, Literal):
            return node.value

        if isinstance(node, Var):
            return env.get(node.name)

        if isinstance(node, Create):
            value = self.evaluate(node.value, env)
            env.define(self.spell_name(node), value)
            return None

        if isinstance(node, Set):
            value = self.evaluate(node.value, env)
            env.assign(self.spell_name(node), value)
            return None

        if isinstance(node, Print):
            value = self.evaluate(node.value, env)
            self.output_fn(format_value(value), "log")
            return None

        if isinstance(node, Binary):
            left = self.evaluate(node.left, env)
            right = self.evaluate(node.right, env)
            return self.binary_op(node.op, left, right)

        if isinstance(node, Input):
            return coerce_input(self.input_fn(INPUT_PROMPT))

        if isinstance(node, Unary):
            value = self.evaluate(node.expr, env)
            if node.op == "ord":
                return self.spell_ord(value)
            if node.op == "chr":
                return self.spell_chr(value)
            raise SpellRuntimeError(f"Unknown unary operator: {node.op}")

        if isinstance(node, If):
            if is_truthy(self.evaluate(node.condition, env)):
                self.execute_block(node.then_block, env)
            elif node.else_block is not None:
                self.execute_block(node.else_block, env)
            return None

        if isinstance(node, While):
            while is_truthy(self.evaluate(node.condition, env)):
                self.tick()
                self.execute_block(node.body, env)
            return None

        kind = getattr(node, "kind", None) or type(node).__name__
        raise SpellRuntimeError(f"Unknown AST node type: {kind}")

    # ---------- HELPERS ----------
    def spell_name(self, node):
        if not isinstance(node.name, Var):
            got = getattr(node.name, "kind", None) or type(node.name).__name__
            raise SpellTypeError(f"{node.kind} expects an identifier name, got {got}")
        return node.name.name

    def binary_op(self, op, left, right):
        if op == "+":
            if isinstance(left, str) or isinstance(right, str):
                return format_value(left) + format_value(right)
            self.require_numbers("combine", left, right)
            return left + right

        if op in ("-", "*", "/"):
            verb = {"-": "remove", "*": "duplicate", "/": "split"}[op]
            self.require_numbers(verb, left, right)
            if op == "-":
                return left - right
            if op == "*":
                return left * right
            if right == 0:
                raise SpellArithmeticError("Division by zero is forbidden magic!")
            if isinstance(left, int) and isinstance(right, int) and left % right == 0:
                return left // right
            return left / right

        if op == "==":
            return strict_equals(left, right)
        if op == "!=":
            return not strict_equals(left, right)

        if op in (">", "<"):
            comparable = (is_number(left) and is_number(right)) or (
                isinstance(left, str) and isinstance(right, str)
            )
            if not comparable:
                # a string never orders against a number
                return False
            return left > right if op == ">" else left < right

        raise SpellRuntimeError(f"Unknown operator: {op}")

    def require_numbers(self, verb, left, right):
        if not (is_number(left) and is_number(right)):
            raise SpellTypeError(f"Cannot {verb} the power of {type_name(left)} and {type_name(right)}")

    def spell_ord(self, value):
        if not isinstance(value, str) or len(value) != 1:
            raise SpellTypeError("The 'ord' spell requires a single character string.")
        return ord(value)

    def spell_chr(self, value):
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        if isinstance(value, bool) or not isinstance(value, int):
            raise SpellTypeError("The 'chr' spell requires an integer code.")
        if not 0 <= value <= 0x10FFFF:
            raise SpellTypeError(f"The 'chr' spell has no character for code {value}.")
        return chr(value)


def run_source(source, output_fn=None, input_fn=None, lenient: bool = False, max_steps: int | None = None) -> bool:
    """Lexes, parses and runs source. Lex and parse errors propagate; runtime errors are reported."""
    program = parse(tokenize(source), lenient=lenient)
    return Interpreter(program, output_fn, input_fn, max_steps=max_steps).run()
