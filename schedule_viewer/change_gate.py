"""
Stability gate deciding when a polled snapshot gets rendered.

A live solver can publish a schedule in the middle of a move. The gate only
commits a changed fingerprint once it has been seen on consecutive polls, which
filters single-poll transients without waiting for the solver to go quiet.
This is a heuristic debounce: nothing guarantees that a continuously mutating
solver ever repeats a fingerprint, so the threshold is left tunable.
"""

from dataclasses import dataclass

# Number of consecutive sightings of a changed fingerprint before rendering
REQUIRED_STABILITY = 2


@dataclass
class ChangeGate:
    required_stability: int = REQUIRED_STABILITY
    last_rendered: str | None = None
    pending_fingerprint: str | None = None
    pending_count: int = 0
    has_rendered: bool = False

    def __post_init__(self) -> None:
        if self.required_stability < 1:
            raise ValueError("required_stability must be at least 1")

    def observe(self, fingerprint: str) -> bool:
        """
        Feed one polled fingerprint through the gate.

        Returns:
            True when the caller should render the snapshot now
        """
        if not self.has_rendered:
            self._commit(fingerprint)
            return True

        if fingerprint == self.last_rendered:
            # Back to the state on screen
            self._clear_pending()
            return False

        if self.pending_fingerprint == fingerprint:
            self.pending_count += 1
        else:
            self.pending_fingerprint = fingerprint
            self.pending_count = 1

        if self.pending_count >= self.required_stability:
            self._commit(fingerprint)
            return True
        return False

    def reset(self) -> None:
        """Forget all history so the next snapshot renders immediately."""
        self.last_rendered = None
        self.has_rendered = False
        self._clear_pending()

    def _commit(self, fingerprint: str) -> None:
        self.last_rendered = fingerprint
        self.has_rendered = True
        self._clear_pending()

    def _clear_pending(self) -> None:
        self.pending_fingerprint = None
        self.pending_count = 0
