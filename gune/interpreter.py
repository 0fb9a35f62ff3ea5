from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from gune import RuntimeValue, config
from gune.errors import GuneError, RecursionLimitExceeded
from gune.evaluation.evaluator import evaluate
from gune.reader.lexer import Token, tokenize
from gune.reader.parser import parse
from gune.types.ast import Program
from gune.types.environment import Environment
from gune.types.values import Float, render

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Outcome:
    """Result of one top-level input: a value or the error that aborted it."""
    value: Optional[RuntimeValue] = None
    error: Optional[GuneError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def render(self) -> str:
        if self.error is not None:
            return f"{self.error.kind}: {self.error}"
        return render(self.value)


class Interpreter:
    """
    Orchestrates lexing, parsing and evaluating gune source.

    The root frame holds the seeded constants. With `isolate_inputs` every call
    evaluates in a fresh child of the root, so nothing an input binds leaks into
    the next one; otherwise the root frame itself is reused.
    """

    def __init__(
        self,
        constants: Mapping[str, float] | None = None,
        *,
        isolate_inputs: bool = True,
    ):
        self.env: Environment = Environment()
        self.isolate_inputs = isolate_inputs
        if constants is None:
            constants = config.get_constants()
        self.env.update({name: Float(float(value)) for name, value in constants.items()})

    def declare(self, name: str, value: RuntimeValue) -> RuntimeValue:
        return self.env.declare(name, value)

    def tokens(self, code: str) -> list[Token]:
        return tokenize(code)

    def parse(self, code: str) -> Program:
        return parse(code)

    def eval(self, code: str) -> RuntimeValue:
        """Evaluate `code`, raising the first GuneError met."""
        program = self.parse(code)
        if not self.isolate_inputs:
            return evaluate(program, self.env)
        # Frames opened for this input are released once it is done
        mark = len(self.env.arena)
        try:
            return evaluate(program, self.env.child())
        finally:
            self.env.arena.truncate(mark)

    def run(self, code: str) -> Outcome:
        """Evaluate `code`, returning failures as values instead of raising."""
        try:
            return Outcome(value=self.eval(code))
        except GuneError as ex:
            logger.debug("input %r failed: %s", code, ex)
            return Outcome(error=ex)
        except RecursionError:
            logger.debug("input %r exhausted the interpreter stack", code)
            return Outcome(error=RecursionLimitExceeded())
