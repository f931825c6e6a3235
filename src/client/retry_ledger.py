"""Per-request-key counter of consecutive 401s."""

from typing import Dict


class RetryLedger:
    """Counts 401 retries per request key.

    Owned by a single controller and never shared. Entries appear on the
    first 401 for a key and disappear when the request succeeds, when
    escalation finds the session valid, or when the client logs out.
    """

    def __init__(self) -> None:
        self._counts: Dict[str, int] = {}

    def get(self, key: str) -> int:
        return self._counts.get(key, 0)

    def increment(self, key: str) -> int:
        self._counts[key] = self._counts.get(key, 0) + 1
        return self._counts[key]

    def reset(self, key: str) -> None:
        self._counts.pop(key, None)

    def clear(self) -> None:
        self._counts.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._counts

    def __len__(self) -> int:
        return len(self._counts)
