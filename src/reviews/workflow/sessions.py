"""Review sessions — short-lived, per-user state between verification and submission.

A session is created right after a transaction is verified and lives until
the review is submitted, the session is deleted, or it expires. Sessions
are never persisted; a restart drops every in-flight review.

Expiry is evaluated lazily by `is_expired`. `purge_expired` exists for a
periodic reaper but correctness never depends on it.
"""

import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from purchases.payment import LineItem, PaymentRecord

SESSION_TIMEOUT = 600  # seconds


class SessionState(Enum):
    AWAITING_CONFIRMATION = "AwaitingProductConfirmation"
    AWAITING_CONTENT = "AwaitingReviewContent"
    COMPLETED = "Completed"


@dataclass
class ReviewSession:
    transaction_id: str
    payment: PaymentRecord
    expires_at: float
    state: SessionState = SessionState.AWAITING_CONFIRMATION
    product_image: str | None = None

    @property
    def product(self) -> LineItem | None:
        return self.payment.product


class SessionStore(ABC):
    """Abstract session store keyed by user identity."""

    @abstractmethod
    def create(self, user_id: str, transaction_id: str, payment: PaymentRecord) -> ReviewSession:
        """Insert or replace the session for `user_id`."""
        ...

    @abstractmethod
    def get(self, user_id: str) -> ReviewSession | None:
        """Return the session for `user_id` without checking expiry."""
        ...

    @abstractmethod
    def is_expired(self, user_id: str) -> bool:
        """True if `user_id` has no session, or its session is past expiry."""
        ...

    @abstractmethod
    def save(self, user_id: str, session: ReviewSession) -> None:
        """Write back a session whose state has advanced."""
        ...

    @abstractmethod
    def delete(self, user_id: str) -> None:
        """Remove the session for `user_id`, if any."""
        ...

    @abstractmethod
    def purge_expired(self) -> int:
        """Remove every expired session and return how many were removed."""
        ...


class InMemorySessionStore(SessionStore):
    """Process-local session store for single-instance deployments."""

    def __init__(self, timeout: float = SESSION_TIMEOUT, clock: Callable[[], float] = time.time) -> None:
        self.timeout = timeout
        self.clock = clock
        self._sessions: dict[str, ReviewSession] = {}

    def create(self, user_id: str, transaction_id: str, payment: PaymentRecord) -> ReviewSession:
        session = ReviewSession(
            transaction_id=transaction_id,
            payment=payment,
            expires_at=self.clock() + self.timeout,
        )
        self._sessions[str(user_id)] = session
        return session

    def get(self, user_id: str) -> ReviewSession | None:
        return self._sessions.get(str(user_id))

    def is_expired(self, user_id: str) -> bool:
        session = self._sessions.get(str(user_id))
        if session is None:
            return True
        return self.clock() > session.expires_at

    def save(self, user_id: str, session: ReviewSession) -> None:
        self._sessions[str(user_id)] = session

    def delete(self, user_id: str) -> None:
        self._sessions.pop(str(user_id), None)

    def purge_expired(self) -> int:
        now = self.clock()
        expired = [user_id for user_id, session in self._sessions.items() if now > session.expires_at]
        for user_id in expired:
            del self._sessions[user_id]
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)
