import pytest

from ast_nodes import Literal, Unary
from environment import Environment
from errors import SpellArithmeticError, SpellRuntimeError, SpellTypeError
from interpreter import INPUT_PROMPT, Interpreter, coerce_input, format_value, is_truthy, run_source, strict_equals
from lexer import tokenize
from parser import parse


def run_program(source, inputs=None, **kwargs):
    out = []
    prompts = []
    replies = list(inputs or [])

    def output(message, severity="log"):
        out.append((severity, message))

    def read(prompt):
        prompts.append(prompt)
        return replies.pop(0)

    ok = run_source(source, output, read, **kwargs)
    return ok, out, prompts


def printed(source, inputs=None):
    ok, out, _ = run_program(source, inputs)
    if not ok:
        raise AssertionError(f"Run failed: {out}")
    return [message for _, message in out]


def evaluate(source, env=None):
    program = parse(tokenize(f"shout the many cries of {source}"))
    expr = program.statements[0].value
    return Interpreter(program).evaluate(expr, env or Environment())


def test_create_then_print():
    assert printed("create a new spell named x with the power of 5\nshout the many cries of x") == ["5"]


def test_print_uses_log_severity():
    ok, out, _ = run_program("shout the many cries of combine the power of 2 and 3")
    assert ok
    assert out == [("log", "5")]


def test_division_by_zero_is_reported_once():
    ok, out, _ = run_program("shout the many cries of split the power of 10 0 times")
    assert not ok
    assert out == [("error", "Runtime Error: Division by zero is forbidden magic!")]


def test_division_by_runtime_zero():
    source = """
    create a new spell named x with the power of 10
    set the power of x to 0
    shout the many cries of split the power of 5 x times
    """
    ok, out, _ = run_program(source)
    assert not ok
    assert out[0][0] == "error"
    with pytest.raises(SpellArithmeticError):
        evaluate("split the power of 1.5 0.0 times")


def test_if_else():
    source = (
        'cast only if the spell is 1 equal to 1 is true do shout the many cries of "yes" '
        'else do shout the many cries of "no" done'
    )
    assert printed(source) == ["yes"]
    assert printed(source.replace("equal to 1", "equal to 2")) == ["no"]


def test_while_counts_down_outer_spell():
    source = """
    create a new spell named n with the power of 3
    whilst the spell is n greater than 0 is true do
        set the power of n to remove the power of 1 from n
        shout the many cries of n
    done
    shout the many cries of n
    """
    assert printed(source) == ["2", "1", "0", "0"]


def test_loop_local_create_leaves_outer_spell_alone():
    source = """
    create a new spell named n with the power of 3
    create a new spell named i with the power of 0
    whilst the spell is i less than 2 is true do
        create a new spell named n with the power of 100
        set the power of i to combine the power of i and 1
    done
    shout the many cries of n
    shout the many cries of i
    """
    assert printed(source) == ["3", "2"]


def test_loop_passes_do_not_share_block_spells():
    source = """
    create a new spell named i with the power of 0
    whilst the spell is i less than 2 is true do
        cast only if the spell is i equal to 1 is true do
            shout the many cries of seen
        done
        create a new spell named seen with the power of i
        set the power of i to combine the power of i and 1
    done
    """
    ok, out, _ = run_program(source)
    assert not ok
    assert out == [("error", "Runtime Error: Undefined variable 'seen'")]


def test_block_spells_do_not_leak():
    source = """
    cast only if the spell 1 is true do
        create a new spell named inner with the power of 1
    done
    shout the many cries of inner
    """
    ok, out, _ = run_program(source)
    assert not ok
    assert "Undefined variable 'inner'" in out[-1][1]


def test_chr_and_ord():
    assert evaluate("get the character from the spell 65") == "A"
    assert evaluate('may the sorcerers cast their spells on "A"') == 65
    assert printed("shout the many cries of get the character from the spell 65") == ["A"]


def test_chr_ord_round_trip_on_printable_ascii():
    interp = Interpreter([])
    env = Environment()
    for code in range(32, 127):
        node = Unary("ord", Unary("chr", Literal(code, "INTEGER")))
        assert interp.evaluate(node, env) == code


@pytest.mark.parametrize(
    "expr",
    [
        'may the sorcerers cast their spells on "AB"',
        "may the sorcerers cast their spells on 65",
        'get the character from the spell "A"',
        "get the character from the spell 6.5",
        "get the character from the spell is 1 equal to 1",
    ],
)
def test_ord_chr_reject_wrong_shapes(expr):
    with pytest.raises(SpellTypeError):
        evaluate(expr)


def test_string_and_number_addition():
    assert evaluate('combine the power of "spell" and "book"') == "spellbook"
    assert evaluate('combine the power of "n=" and 5') == "n=5"
    assert evaluate("combine the power of 1.5 and 1.5") == 3.0
    assert printed("shout the many cries of combine the power of 1.5 and 1.5") == ["3"]


def test_arithmetic():
    assert evaluate("remove the power of 2 from 10") == 8
    assert evaluate("duplicate the power of 4 2.5 times") == 10.0
    assert evaluate("split the power of 10 2 times") == 5
    assert evaluate("split the power of 7 2 times") == 3.5
    with pytest.raises(SpellTypeError):
        evaluate('remove the power of 1 from "ten"')


def test_strict_equality():
    assert evaluate("is 1 equal to 1") is True
    assert evaluate('is 1 equal to "1"') is False
    assert evaluate("is 1 equal to 1.0") is True
    assert evaluate('is "a" not equal to "b"') is True
    assert strict_equals(True, 1) is False
    assert strict_equals(False, False) is True


def test_ordering():
    assert evaluate("is 3 greater than 2") is True
    assert evaluate('is "apple" less than "banana"') is True
    # a string and a number never order against each other
    assert evaluate('is "a" greater than 1') is False
    assert evaluate('is "a" less than 1') is False
    assert evaluate('is 1 less than "a"') is False


def test_ordering_non_numeric_input_against_number():
    source = """
    create a new spell named x with the power of find the source of the messages
    cast only if the spell is x greater than 5 is true do
        shout the many cries of "big"
    else do
        shout the many cries of "not big"
    done
    """
    assert printed(source, ["lots"]) == ["not big"]


def test_truthiness():
    for value in ("", 0, 0.0, False, float("nan")):
        assert not is_truthy(value)
    for value in ("0", "false", 1, -1, 0.5, True):
        assert is_truthy(value)
    source = 'cast only if the spell "" is true do shout the many cries of 1 else do shout the many cries of 2 done'
    assert printed(source) == ["2"]


def test_format_value():
    assert format_value(True) == "true"
    assert format_value(5.0) == "5"
    assert format_value(2.5) == "2.5"
    assert format_value("x") == "x"
    assert printed("shout the many cries of is 1 less than 2") == ["true"]


def test_input_is_numeric_when_possible():
    source = """
    create a new spell named x with the power of find the source of the messages
    shout the many cries of combine the power of x and 1
    """
    assert printed(source, ["42"]) == ["43"]
    assert printed(source, ["2.5"]) == ["3.5"]
    assert printed(source, ["abc"]) == ["abc1"]


def test_input_prompt_is_called_once_per_evaluation():
    ok, _, prompts = run_program("shout the many cries of find the source of the messages", ["hi"])
    assert ok
    assert prompts == [INPUT_PROMPT]


def test_coerce_input():
    assert coerce_input(" 7 ") == 7
    assert coerce_input("1e3") == 1000.0
    assert coerce_input("nan") == "nan"
    assert coerce_input("") == ""
    assert coerce_input("   ") == "   "
    assert coerce_input(None) == ""
    assert coerce_input("-4") == -4
    assert coerce_input(".5") == 0.5


@pytest.mark.parametrize("text", ["1_000", "٣", "１２", "1.2.3", ".", "0x10", "inf"])
def test_coerce_input_keeps_non_decimal_text(text):
    assert coerce_input(text) == text


def test_undefined_spell_on_set():
    ok, out, _ = run_program("set the power of y to 1")
    assert not ok
    assert out == [("error", "Runtime Error: Undefined variable 'y'")]


def test_create_with_non_identifier_name():
    ok, out, _ = run_program("create a new spell named combine the power of 1 and 2 with the power of 3")
    assert not ok
    assert out == [("error", "Runtime Error: CREATE expects an identifier name, got ADD")]


def test_failure_aborts_remaining_statements():
    source = "shout the many cries of 1 shout the many cries of ghost shout the many cries of 2"
    ok, out, _ = run_program(source)
    assert not ok
    assert out == [("log", "1"), ("error", "Runtime Error: Undefined variable 'ghost'")]


def test_step_limit_stops_unbounded_loop():
    ok, out, _ = run_program("whilst the spell 1 is true do done", max_steps=50)
    assert not ok
    assert "Step limit exceeded" in out[-1][1]


def test_unknown_node_kind():
    with pytest.raises(SpellRuntimeError) as info:
        Interpreter([]).evaluate(object(), Environment())
    assert "Unknown AST node type" in str(info.value)


def test_pure_expression_is_idempotent():
    env = Environment()
    env.define("x", 4)
    program = parse(tokenize("shout the many cries of combine the power of duplicate the power of x 2 times and 1"))
    expr = program.statements[0].value
    interp = Interpreter(program)
    assert interp.evaluate(expr, env) == interp.evaluate(expr, env) == 9


def test_each_run_gets_fresh_globals():
    program = parse(tokenize("create a new spell named x with the power of 1"))
    interp = Interpreter(program, lambda *a: None)
    assert interp.run()
    first = interp.global_env
    assert interp.run()
    assert interp.global_env is not first


def test_run_with_shared_environment():
    env = Environment()
    sink = []
    Interpreter(parse(tokenize("create a new spell named x with the power of 2")), lambda m, s="log": sink.append(m)).run(env)
    Interpreter(parse(tokenize("shout the many cries of x")), lambda m, s="log": sink.append(m)).run(env)
    assert sink == ["2"]
