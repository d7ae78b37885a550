# app/board/numbering.py
import logging
import random
from typing import Iterable

from app.board.errors import BoardValidationError, DuplicateNumberError

logger = logging.getLogger(__name__)

RANDOM_LOW = 10
RANDOM_HIGH = 99


def format_number(number: int) -> str:
    return f"{number:02d}"


def validate_number(number) -> int:
    # bool is an int subclass; True must not pass as ticket 1
    if isinstance(number, bool) or not isinstance(number, int) or number <= 0:
        raise BoardValidationError(f"Ticket number must be a positive integer, got {number!r}")
    return number


class NumberingPolicy:
    """Issues ticket numbers and tracks the numbers in use.

    Numbers of deleted tickets are never released, so the used set is a
    superset of the live ticket numbers.
    """

    def __init__(self, sequential: bool = False, max_attempts: int = 500, rng: random.Random | None = None):
        self.sequential = sequential
        self.max_attempts = max_attempts
        self._rng = rng or random.Random()
        self._used: set[int] = set()

    @property
    def used(self) -> frozenset[int]:
        return frozenset(self._used)

    def track(self, numbers: Iterable[int]) -> None:
        self._used.update(numbers)

    def is_available(self, number: int, own: int | None = None) -> bool:
        return number == own or number not in self._used

    def next_number(self) -> int:
        if self.sequential:
            number = max(self._used, default=0) + 1
        else:
            number = self._draw()
        self._used.add(number)
        return number

    def _draw(self) -> int:
        number = self._rng.randint(RANDOM_LOW, RANDOM_HIGH)
        attempts = 1
        while number in self._used and attempts < self.max_attempts:
            number = self._rng.randint(RANDOM_LOW, RANDOM_HIGH)
            attempts += 1
        if number in self._used:
            # past 99 so the number stays unique
            number = max(self._used) + 1
            logger.warning("No free two-digit number after %d draws, issuing %s", attempts, format_number(number))
        return number

    def claim(self, number: int) -> int:
        validate_number(number)
        if number in self._used:
            raise DuplicateNumberError(number)
        self._used.add(number)
        return number

    def reassign(self, old: int | None, new: int) -> None:
        validate_number(new)
        if not self.is_available(new, own=old):
            raise DuplicateNumberError(new)
        if old is not None:
            self._used.discard(old)
        self._used.add(new)

    def release(self, number: int) -> None:
        self._used.discard(number)
