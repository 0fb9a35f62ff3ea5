"""Runtime environment for gune.

Scopes are frames stored in a ScopeArena and addressed by index. Each frame
keeps the index of its parent (None for the root), and a child frame can only
be allocated after its parent, so the arena order doubles as a topological
order of the scope tree. An Environment is a light handle (arena, index) that
implements lexical resolution by walking parent indices. Every frame carries
a serial that is never reused, so a handle whose frame was released by
ScopeArena.truncate raises ReferenceError instead of reaching a newer frame
allocated at the same index.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from io import StringIO
from itertools import count
from typing import Iterator, Mapping, Optional

from gune import RuntimeValue
from gune.errors import DuplicateBinding, UndefinedVariable


@dataclass
class Frame:
    parent: Optional[int]
    serial: int
    vars: dict[str, RuntimeValue] = field(default_factory=dict)


class ScopeArena:
    """Owns every frame of one scope tree."""

    __slots__ = ("frames", "_serials")

    def __init__(self):
        self.frames: list[Frame] = []
        self._serials = count()

    def allocate(self, parent: Optional[int] = None) -> int:
        if parent is not None and not 0 <= parent < len(self.frames):
            raise IndexError(f"No frame {parent} to use as parent")
        self.frames.append(Frame(parent, next(self._serials)))
        return len(self.frames) - 1

    def truncate(self, size: int) -> None:
        """Drop every frame allocated after the first `size` frames.

        Handles on dropped frames raise ReferenceError when used afterwards.
        """
        del self.frames[size:]

    def __len__(self) -> int:
        return len(self.frames)


class Environment:
    """Handle on one frame of a ScopeArena, with lexical lookup through parents."""

    __slots__ = ("arena", "index", "serial")

    def __init__(self, arena: Optional[ScopeArena] = None, index: Optional[int] = None):
        if arena is None:
            arena = ScopeArena()
        if index is None:
            index = arena.allocate()
        self.arena = arena
        self.index = index
        self.serial = arena.frames[index].serial

    @property
    def released(self) -> bool:
        frames = self.arena.frames
        return self.index >= len(frames) or frames[self.index].serial != self.serial

    @property
    def frame(self) -> Frame:
        if self.released:
            raise ReferenceError(f"Environment #{self.index} refers to a released frame")
        return self.arena.frames[self.index]

    @property
    def parent(self) -> Optional[Environment]:
        parent = self.frame.parent
        return None if parent is None else Environment(self.arena, parent)

    def child(self) -> Environment:
        """Open a nested scope whose parent is this frame."""
        return Environment(self.arena, self.arena.allocate(self.index))

    def _frames(self) -> Iterator[Frame]:
        # Parents are allocated before children, so only the first frame can be stale
        frame = self.frame
        while True:
            yield frame
            if frame.parent is None:
                return
            frame = self.arena.frames[frame.parent]

    def _find(self, name: str) -> Optional[Frame]:
        for frame in self._frames():
            if name in frame.vars:
                return frame
        return None

    def resolve(self, name: str) -> Optional[Environment]:
        """Find the nearest environment in the chain that binds `name`."""
        index: Optional[int] = self.index
        frame = self.frame
        while True:
            if name in frame.vars:
                return Environment(self.arena, index)
            index = frame.parent
            if index is None:
                return None
            frame = self.arena.frames[index]

    def declare(self, name: str, value: RuntimeValue) -> RuntimeValue:
        """Bind `name` in this frame only.

        Parent frames are not consulted, so a child may shadow an outer binding.
        Raises DuplicateBinding if this frame already binds `name`.
        """
        frame = self.frame
        if name in frame.vars:
            raise DuplicateBinding(name)
        frame.vars[name] = value
        return value

    def assign(self, name: str, value: RuntimeValue) -> RuntimeValue:
        """Update the nearest existing binding of `name`.

        Raises UndefinedVariable if no frame in the chain binds it.
        """
        frame = self._find(name)
        if frame is None:
            raise UndefinedVariable(name)
        frame.vars[name] = value
        return value

    def lookup(self, name: str) -> RuntimeValue:
        frame = self._find(name)
        if frame is None:
            raise UndefinedVariable(name)
        return frame.vars[name]

    def update(self, mapping: Mapping[str, RuntimeValue]) -> None:
        """Bulk-declare a mapping of name -> value in the current frame."""
        for name, value in mapping.items():
            self.declare(name, value)

    def names(self) -> dict[str, RuntimeValue]:
        """Every visible binding, nearest frame winning."""
        visible: dict[str, RuntimeValue] = {}
        for frame in self._frames():
            for name, value in frame.vars.items():
                visible.setdefault(name, value)
        return visible

    def __contains__(self, name: str) -> bool:
        return self._find(name) is not None

    def __eq__(self, other) -> bool:
        return isinstance(other, Environment) and self.arena is other.arena and self.serial == other.serial

    def __hash__(self) -> int:
        return hash((id(self.arena), self.serial))

    def _write_vars(self, buffer: StringIO, frame: Frame) -> None:
        buffer.write("{")
        buffer.write(", ".join(f"{k}: {v!r}" for k, v in frame.vars.items()))
        buffer.write("}")

    def __str__(self) -> str:
        """Single-frame view with an indicator for parent."""
        with StringIO() as buffer:
            self._write_vars(buffer, self.frame)
            if self.frame.parent is not None:
                buffer.write(" -> ...")
            return buffer.getvalue()

    def __repr__(self) -> str:
        if self.released:
            return f"<Environment #{self.index}: released>"
        with StringIO() as buffer:
            buffer.write(f"<Environment #{self.index}: ")
            chain = []
            for frame in self._frames():
                with StringIO() as frame_buf:
                    self._write_vars(frame_buf, frame)
                    chain.append(frame_buf.getvalue())
            buffer.write(" -> ".join(chain))
            buffer.write(">")
            return buffer.getvalue()
