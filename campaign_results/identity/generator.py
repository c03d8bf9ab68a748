"""
Collision-free external identifiers for result records.

Identifiers are drawn from the OS CSPRNG one symbol at a time with
``secrets.choice``, which selects by rejection sampling and so stays
uniform for alphabets whose size is not a power of two. A free-identifier
pre-check avoids most collisions; the store's UNIQUE constraint is the
final arbiter, and an insert that loses a race is retried with a fresh
identifier from the same attempt budget.
"""

import secrets
from typing import Callable, Protocol, TypeVar

from ..config.defaults import RID_ALPHABET, RID_LENGTH
from ..errors import DuplicateIdentifierError, GenerationExhausted
from ..logging.config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class IdentifierLookup(Protocol):
    """Answers whether an identifier is already assigned."""

    def rid_exists(self, rid: str) -> bool:
        ...


def generate_rid() -> str:
    """Random identifier of RID_LENGTH symbols drawn uniformly from RID_ALPHABET."""
    return "".join(secrets.choice(RID_ALPHABET) for _ in range(RID_LENGTH))


class IdentifierGenerator:
    """Generates identifiers not yet taken in the store."""

    def __init__(
        self,
        lookup: IdentifierLookup,
        max_attempts: int = 20
    ):
        self.lookup = lookup
        self.max_attempts = max_attempts
        self.logger = logger

    def assign(self, create: Callable[[str], T]) -> T:
        """
        Run ``create`` with a fresh identifier until the insert sticks.

        ``create`` must raise DuplicateIdentifierError when the store's
        uniqueness constraint rejects the identifier. Pre-check collisions
        and rejected inserts share one attempt budget.

        Raises:
            GenerationExhausted: the attempt budget ran out
        """
        attempts = 0
        while attempts < self.max_attempts:
            attempts += 1
            candidate = generate_rid()

            if self.lookup.rid_exists(candidate):
                self.logger.warning("Identifier collision", attempt=attempts)
                continue

            try:
                return create(candidate)
            except DuplicateIdentifierError:
                self.logger.warning(
                    "Identifier taken by concurrent insert, regenerating",
                    attempt=attempts
                )

        self.logger.error("Identifier generation exhausted", attempts=self.max_attempts)
        raise GenerationExhausted(
            f"No free identifier after {self.max_attempts} attempts",
            attempts=self.max_attempts,
        )
