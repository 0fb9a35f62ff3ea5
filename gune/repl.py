"""Interactive read-eval-print loop for gune.

Every line is one top-level input. A failing input prints its error and the
loop moves on to the next line. Lines starting with ':' are REPL commands:

    :quit, :q       leave the loop
    :ast <code>     show the syntax tree of <code>
    :sexpr <code>   show <code> fully parenthesised, e.g. (+ 2 (* 3 4))
    :tokens <code>  show the token stream of <code>
    :env            list the bindings visible to inputs
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence, TextIO

from gune import __version__, config
from gune.debug_utils.pprint import format_ast, format_tokens, to_sexpr
from gune.errors import GuneError
from gune.interpreter import Interpreter
from gune.types.values import render

logger = logging.getLogger(__name__)

BANNER = f"io.repl v{__version__}"
QUIT_COMMANDS = {":quit", ":q"}


class Repl:
    def __init__(
        self,
        interpreter: Interpreter,
        stdin: TextIO = sys.stdin,
        stdout: TextIO = sys.stdout,
        prompt: Optional[str] = None,
        color: bool = False,
    ):
        self.interp = interpreter
        self.stdin = stdin
        self.stdout = stdout
        self.prompt = config.get_prompt() if prompt is None else prompt
        self.color = color

    def handle(self, line: str) -> Optional[str]:
        """Process one input line. Returns the text to print, or None to quit."""
        line = line.strip()
        if not line:
            return ""
        if line in QUIT_COMMANDS:
            return None
        if line.startswith(":"):
            return self._command(line)

        outcome = self.interp.run(line)
        if outcome.ok:
            return f"> {outcome.render()}"
        return f"! {outcome.render()}"

    def _command(self, line: str) -> str:
        name, _, code = line.partition(" ")
        try:
            if name == ":ast":
                return format_ast(self.interp.parse(code), color=self.color)
            if name == ":sexpr":
                return to_sexpr(self.interp.parse(code))
            if name == ":tokens":
                return format_tokens(self.interp.tokens(code))
        except GuneError as ex:
            return f"! {ex.kind}: {ex}"
        if name == ":env":
            return "\n".join(f"{k} = {render(v)}" for k, v in sorted(self.interp.env.names().items()))
        return f"! unknown command {name}"

    def loop(self) -> None:
        self.stdout.write(f"\n{BANNER}\n")
        while True:
            self.stdout.write(self.prompt)
            self.stdout.flush()
            line = self.stdin.readline()
            if not line:
                self.stdout.write("\n")
                break
            output = self.handle(line)
            if output is None:
                break
            if output:
                self.stdout.write(output + "\n")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gune", description="gune expression REPL")
    parser.add_argument("-c", "--command", help="evaluate CODE, print the result and exit")
    parser.add_argument("--no-constants", action="store_true", help="do not seed constants such as pi")
    parser.add_argument("--keep-bindings", action="store_true", help="evaluate every input in the same root scope")
    parser.add_argument("--color", action="store_true", help="colorize :ast output")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=config.LOG_LEVELS,
        default=None,
        help="logging level (default: $GUNE_LOG_LEVEL or WARNING)",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level or config.get_log_level())

    interp = Interpreter(
        constants={} if args.no_constants else None,
        isolate_inputs=not args.keep_bindings,
    )

    if args.command is not None:
        outcome = interp.run(args.command)
        print(outcome.render(), file=sys.stdout if outcome.ok else sys.stderr)
        return 0 if outcome.ok else 1

    try:
        Repl(interp, color=args.color).loop()
    except KeyboardInterrupt:
        logger.debug("interrupted")
        print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
