import sys
import traceback

from colorama import Fore, Style, just_fix_windows_console

from environment import Environment
from errors import SpellError
from interpreter import Interpreter
from lexer import tokenize
from parser import Parser

SAMPLE_CODE = """shout the many cries of "Enter in first number: "
shout the many cries of
    get the character from the spell 10
create a new spell named first with the power of
    find the source of the messages
shout the many cries of "Enter in second number: "
shout the many cries of
    get the character from the spell 10
create a new spell named second with the power of
    find the source of the messages
shout the many cries of "Enter in operator (+ - * /): "
shout the many cries of
    get the character from the spell 10
create a new spell named op with the power of
    find the source of the messages
cast only if the spell is op equal to "+" is true do
    shout the many cries of
        combine the power of first and second
else do
    cast only if the spell is op equal to "-" is true do
        shout the many cries of
            remove the power of second from first
    else do
        cast only if the spell is op equal to "*" is true do
            shout the many cries of
                duplicate the power of first second times
        else do
            cast only if the spell is op equal to "/" is true do
                shout the many cries of
                    split the power of first second times
            else do
                shout the many cries of "Invalid Operator!"
            done
        done
    done
done
"""

SEVERITY_COLORS = {
    "info": Fore.CYAN,
    "error": Fore.RED,
}


def make_output(color: bool = True):
    if color:
        just_fix_windows_console()

    def output(message, severity="log"):
        stream = sys.stderr if severity == "error" else sys.stdout
        text = str(message)
        if color and severity in SEVERITY_COLORS:
            text = f"{SEVERITY_COLORS[severity]}{text}{Style.RESET_ALL}"
        print(text, file=stream)
        stream.flush()

    return output


def read_input(prompt):
    try:
        return input(prompt + " ")
    except (EOFError, KeyboardInterrupt):
        return ""


# Simple AST printer (so you can SEE what the parser built)
def ast_to_dict(node):
    if node is None:
        return None

    t = node.__class__.__name__
    if t == "Program":
        return {"type": "Program", "statements": [ast_to_dict(s) for s in node.statements]}
    if t == "Block":
        return {"type": "Block", "statements": [ast_to_dict(s) for s in node.statements]}

    d = {"type": node.kind}
    if t == "Literal":
        d["value"] = repr(node.value)
    elif t == "Var":
        d["name"] = node.name
    elif t in ("Create", "Set"):
        d["name"] = ast_to_dict(node.name)
        d["value"] = ast_to_dict(node.value)
    elif t == "Print":
        d["value"] = ast_to_dict(node.value)
    elif t == "Binary":
        d["left"] = ast_to_dict(node.left)
        d["right"] = ast_to_dict(node.right)
    elif t == "Unary":
        d["value"] = ast_to_dict(node.expr)
    elif t == "If":
        d["condition"] = ast_to_dict(node.condition)
        d["then_block"] = ast_to_dict(node.then_block)
        d["else_block"] = ast_to_dict(node.else_block)
    elif t == "While":
        d["condition"] = ast_to_dict(node.condition)
        d["body"] = ast_to_dict(node.body)

    return d


def pretty(obj, indent=0):
    sp = "  " * indent
    if isinstance(obj, dict):
        lines = []
        for k, v in obj.items():
            if isinstance(v, (dict, list)):
                lines.append(f"{sp}{k}:")
                lines.append(pretty(v, indent + 1))
            else:
                lines.append(f"{sp}{k}: {v}")
        return "\n".join(lines)
    if isinstance(obj, list):
        lines = []
        for item in obj:
            lines.append(f"{sp}-")
            lines.append(pretty(item, indent + 1))
        return "\n".join(lines)
    return f"{sp}{obj}"


def read_source(path):
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def report_failure(e, debug, output):
    if debug:
        traceback.print_exc()
    else:
        output(str(e), "error")


def cmd_tokens(path, debug=False, output=None):
    try:
        tokens = tokenize(read_source(path))
    except (OSError, SpellError) as e:
        report_failure(e, debug, output)
        sys.exit(1)

    for tok in tokens:
        print(f"{tok.line}:{tok.column}  {tok.describe()}")


def cmd_parse(path, debug=False, output=None, lenient=False):
    try:
        program = Parser(tokenize(read_source(path)), lenient=lenient).parse()
    except (OSError, SpellError) as e:
        report_failure(e, debug, output)
        sys.exit(1)

    print(pretty(ast_to_dict(program)))


def cmd_run(path, debug=False, output=None, lenient=False, max_steps=None):
    try:
        program = Parser(tokenize(read_source(path)), lenient=lenient).parse()
    except (OSError, SpellError) as e:
        report_failure(e, debug, output)
        sys.exit(1)

    output("Casting spell...", "info")
    interpreter = Interpreter(program, output, read_input, max_steps=max_steps)
    if not interpreter.run():
        sys.exit(1)
    output("Spell finished.", "info")


def _count_blocks_delta(line: str) -> int:
    # Block balancer for REPL multiline input: cast/whilst open, done closes.
    # Strings and comments are ignored by going through the lexer.
    try:
        tokens = tokenize(line)
    except SpellError:
        return 0
    delta = 0
    for tok, nxt in zip(tokens, tokens[1:]):
        if tok.type != "IDENTIFIER":
            continue
        # only the statement openers count; "cast" also appears inside the ord phrase
        if tok.value == "cast" and nxt.value == "only":
            delta += 1
        elif tok.value == "whilst" and nxt.value == "the":
            delta += 1
        elif tok.value == "done":
            delta -= 1
    return delta


def cmd_repl(debug=False, output=None, lenient=False, max_steps=None):
    # One global scope lives across all snippets.
    env = Environment()

    print("SpellCast REPL. Type :q to quit.")

    buffer_lines = []
    block_depth = 0
    while True:
        prompt = "spell> " if not buffer_lines else "...> "
        try:
            line = input(prompt)
        except (EOFError, KeyboardInterrupt):
            print()
            break

        stripped = line.strip()
        if not buffer_lines and stripped in (":q", ":quit", "quit", "exit"):
            break

        if not stripped and not buffer_lines:
            continue

        buffer_lines.append(line)
        block_depth += _count_blocks_delta(line)

        # Wait for block completion if cast/whilst are still open.
        if block_depth > 0:
            continue

        source = "\n".join(buffer_lines) + "\n"
        buffer_lines = []
        block_depth = 0

        try:
            program = Parser(tokenize(source), lenient=lenient).parse()
        except SpellError as e:
            report_failure(e, debug, output)
            continue

        Interpreter(program, output, read_input, max_steps=max_steps).run(env)


def usage():
    print("Usage:")
    print("  python cli.py tokens <file.spell>")
    print("  python cli.py parse <file.spell>")
    print("  python cli.py run <file.spell>")
    print("  python cli.py repl")
    print("  python cli.py sample")
    print("  (optional) --debug to show Python traceback")
    print("  (optional) --no-color to disable colored output")
    print("  (optional) --lenient to stop quietly at an unknown statement")
    print("  (optional) --max-steps N to abort after N statements")
    sys.exit(1)


def main():
    argv = list(sys.argv[1:])

    debug = "--debug" in argv
    color = "--no-color" not in argv
    lenient = "--lenient" in argv
    argv = [a for a in argv if a not in ("--debug", "--no-color", "--lenient")]

    max_steps = None
    if "--max-steps" in argv:
        i = argv.index("--max-steps")
        try:
            max_steps = int(argv[i + 1])
        except (IndexError, ValueError):
            print("--max-steps expects an integer")
            sys.exit(1)
        del argv[i:i + 2]

    if not argv:
        usage()

    output = make_output(color)
    cmd = argv[0]

    if cmd in ("repl", "sample"):
        if len(argv) != 1:
            usage()
        if cmd == "repl":
            cmd_repl(debug=debug, output=output, lenient=lenient, max_steps=max_steps)
        else:
            print(SAMPLE_CODE, end="")
        return

    if len(argv) != 2:
        usage()

    path = argv[1]
    if cmd == "tokens":
        cmd_tokens(path, debug=debug, output=output)
    elif cmd == "parse":
        cmd_parse(path, debug=debug, output=output, lenient=lenient)
    elif cmd == "run":
        cmd_run(path, debug=debug, output=output, lenient=lenient, max_steps=max_steps)
    else:
        print(f"Unknown command: {cmd}")
        sys.exit(1)


if __name__ == "__main__":
    main()
