"""
LineCursor: Forward-only scanning over a list of lines.

Look-ahead extraction (goal text after a label, the name on the line
after "Student Name:") is written as explicit cursor scans with named
stop predicates instead of index arithmetic on the line list.
"""

from typing import Callable, Generic, Optional, Sequence, TypeVar

T = TypeVar("T")

Predicate = Callable[[T], bool]


class LineCursor(Generic[T]):
    """
    A cursor over a sequence that only moves forward.

    The cursor never reads past the end: peek() returns None there and
    every scan simply stops.
    """

    def __init__(self, items: Sequence[T], start: int = 0):
        self._items = items
        self._pos = max(0, start)

    def exhausted(self) -> bool:
        return self._pos >= len(self._items)

    def peek(self) -> Optional[T]:
        """The current item, without consuming it."""
        if self.exhausted():
            return None
        return self._items[self._pos]

    def advance(self) -> Optional[T]:
        """Consume and return the current item."""
        item = self.peek()
        if item is not None:
            self._pos += 1
        return item

    def skip_while(self, predicate: Predicate) -> int:
        """Consume items while predicate holds. Returns how many were skipped."""
        skipped = 0
        while not self.exhausted() and predicate(self.peek()):
            self.advance()
            skipped += 1
        return skipped

    def take_until(
        self,
        stop: Predicate,
        done: Optional[Callable[[list[T]], bool]] = None,
    ) -> list[T]:
        """
        Consume items until `stop` holds for the next item.

        The stopping item is not consumed. If `done` is given it is checked
        after every consumed item against everything taken so far, and a
        True result ends the scan right there.
        """
        taken: list[T] = []
        while not self.exhausted():
            if stop(self.peek()):
                break
            taken.append(self.advance())
            if done is not None and done(taken):
                break
        return taken
