"""In-memory checkout session store."""

import uuid

from checkout.app.orchestration.steps import BookingStepMachine


class InMemoryCheckoutStore:
    """Holds live checkout sessions keyed by draft id.

    Sessions are process-local and vanish on restart; a finished or
    abandoned checkout is simply discarded.
    """

    def __init__(self) -> None:
        self._sessions: dict[uuid.UUID, BookingStepMachine] = {}

    def add(self, machine: BookingStepMachine) -> uuid.UUID:
        """Register a session and return its id."""
        draft_id = machine.draft.draft_id
        self._sessions[draft_id] = machine
        return draft_id

    def get(self, draft_id: uuid.UUID) -> BookingStepMachine | None:
        return self._sessions.get(draft_id)

    def discard(self, draft_id: uuid.UUID) -> None:
        self._sessions.pop(draft_id, None)

    def __len__(self) -> int:
        return len(self._sessions)
