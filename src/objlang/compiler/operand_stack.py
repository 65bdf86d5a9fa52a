"""
The parser's operand stack.

A single growable slot array serves every parse call, both as the operand
stack and as the staging area for sibling lists. A call receives a *base*
index (the caller's cursor) and may only touch slots at or above it; when it
returns, exactly the expressions it produced sit at ``[base, base + k)``.
Every operation checks its frame so that a slice can never alias a slot
owned by an enclosing call.
"""

from objlang.compiler.ast_nodes import Expression
from objlang.utils.errors import StackDisciplineError


class OperandStack:
    """
    Bump-allocated slot array with frame checking.

    Usage:
        stack = OperandStack()
        stack.push(0, expr)             # cursor 0 -> 1
        produced = parse_args(stack, 1) # callee writes at [1, 1 + n)
        args = stack.collapse(1, produced)
    """

    def __init__(self) -> None:
        self._slots: list[Expression] = []
        self.high_water = 0

    def __len__(self) -> int:
        return len(self._slots)

    @property
    def cursor(self) -> int:
        """Index of the next free slot."""
        return len(self._slots)

    def _require(self, condition: bool, message: str) -> None:
        if not condition:
            raise StackDisciplineError(f"operand stack: {message} (cursor={self.cursor})")

    def push(self, base: int, expr: Expression) -> None:
        """Write ``expr`` into the next free slot of the frame starting at ``base``."""
        self._require(base <= self.cursor, f"frame base {base} is past the cursor")
        self._slots.append(expr)
        self.high_water = max(self.high_water, len(self._slots))

    def pop(self, base: int) -> Expression:
        """Remove and return the last slot, which must belong to the frame at ``base``."""
        self._require(self.cursor > base, f"pop below frame base {base}")
        return self._slots.pop()

    def peek(self, base: int) -> Expression:
        self._require(self.cursor > base, f"peek below frame base {base}")
        return self._slots[-1]

    def collapse(self, start: int, count: int) -> tuple[Expression, ...]:
        """
        Remove the contiguous run ``[start, start + count)`` and return it.

        The run must end exactly at the cursor; afterwards the cursor is
        back at ``start`` so the caller can write the node owning the run.
        """
        self._require(count >= 0, f"negative run length {count}")
        self._require(
            start + count == self.cursor,
            f"run [{start}, {start + count}) does not end at the cursor",
        )
        run = tuple(self._slots[start:])
        del self._slots[start:]
        return run

    def check_frame(self, base: int, produced: int) -> None:
        """Assert that a call starting at ``base`` left exactly ``produced`` slots."""
        self._require(
            self.cursor == base + produced,
            f"frame at {base} should hold {produced} expression(s)",
        )

    def clear(self) -> None:
        self._slots.clear()
        self.high_water = 0
