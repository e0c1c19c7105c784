# src/purgecss/mapping/handles.py
import logging
import secrets
from typing import Callable, Optional, Set

from .core import Handle

logger = logging.getLogger(__name__)


class HandleGenerator:
    """
    Issues opaque element handles for a single map.

    Handles are random hex tokens; every candidate is checked against the
    handles already issued by this generator and regenerated on a collision.
    """

    def __init__(
            self,
            length: int = 13,
            max_attempts: int = 100,
            token_factory: Optional[Callable[[int], str]] = None
    ):
        if length < 1:
            raise ValueError("Handle length must be at least 1.")
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1.")

        self.length = length
        self.max_attempts = max_attempts
        self._token_factory = token_factory or self._random_token
        self._issued: Set[Handle] = set()

    @staticmethod
    def _random_token(length: int) -> str:
        # token_hex yields two characters per byte
        return secrets.token_hex((length + 1) // 2)[:length]

    def issue(self) -> Handle:
        """
        Returns a handle that has never been issued by this generator.

        Raises:
            RuntimeError: If no free handle was found within `max_attempts` tries.
        """
        for attempt in range(1, self.max_attempts + 1):
            candidate = self._token_factory(self.length)
            if candidate not in self._issued:
                self._issued.add(candidate)
                return candidate
            logger.debug("Handle collision on '%s' (attempt %d), retrying.", candidate, attempt)

        raise RuntimeError(
            f"Could not generate a unique handle after {self.max_attempts} attempts "
            f"({len(self._issued)} handles issued, length {self.length})."
        )

    def __contains__(self, handle: object) -> bool:
        return handle in self._issued

    def __len__(self) -> int:
        return len(self._issued)
