from __future__ import annotations

from dataclasses import dataclass
from typing import assert_never


@dataclass(frozen=True)
class Float:
    value: float

    def __repr__(self):
        return f"Float({render(self)})"


class NilType:
    __slots__ = ()
    _instance: NilType | None = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self): return "nil"
    def __bool__(self): return False

    def __eq__(self, other):
        return isinstance(other, NilType)

    def __hash__(self):
        return hash(NilType)


Nil = NilType()


def render(value: Float | NilType) -> str:
    """Textual form of a runtime value: shortest decimal for floats, 'nil' for Nil."""
    match value:
        case Float(value=number):
            text = repr(number)
            return text[:-2] if text.endswith(".0") else text
        case NilType():
            return "nil"
    assert_never(value)
