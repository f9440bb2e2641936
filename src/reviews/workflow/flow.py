"""ReviewWorkflow — the guided proof-of-purchase review process.

State Machine:
    Idle → AwaitingTransactionId                        /review shows the transaction form, nothing stored
    AwaitingTransactionId → AwaitingProductConfirmation transaction verified, session created
    AwaitingProductConfirmation → AwaitingReviewContent user chose to write the review
    AwaitingReviewContent → AwaitingReviewContent       review form reopened
    AwaitingReviewContent → Completed                   review announced and stored, session deleted
    (any with a session) → Expired                      session timeout, evaluated lazily

Every guard failure raises a ReviewFlowError and leaves the session as it
was, except expiry (the stale session is dropped) and a duplicate found at
submission time (the flow is over for that transaction).
"""

import asyncio
import re
import threading
from dataclasses import dataclass
from enum import Enum

import structlog

from purchases.payment import LineItem, PaymentRecord
from purchases.verifier import PurchaseVerifier
from reviews.review.lookup import has_review
from reviews.review.recording import RecordStatus, record_review
from reviews.review.review import REVIEW_MAX_LENGTH, REVIEW_MIN_LENGTH
from reviews.workflow.announcement import Announcer, ReviewAnnouncement
from reviews.workflow.errors import (
    InvalidProductName,
    InvalidRating,
    InvalidReviewText,
    InvalidTransactionId,
    NoProductsFound,
    PaymentNotFound,
    ReviewFlowError,
    SessionExpired,
    StepOutOfOrder,
    TransactionAlreadyUsed,
)
from reviews.workflow.sessions import ReviewSession, SessionState, SessionStore

logger = structlog.get_logger(__name__)

TRANSACTION_ID_MIN_LENGTH = 5
TRANSACTION_ID_MAX_LENGTH = 50
RATING_MAX_LENGTH = 1

_RATING_PATTERN = re.compile(r"[1-5]")

_VALID_TRANSITIONS = {
    SessionState.AWAITING_CONFIRMATION: {SessionState.AWAITING_CONTENT},
    SessionState.AWAITING_CONTENT: {SessionState.AWAITING_CONTENT, SessionState.COMPLETED},
    SessionState.COMPLETED: set(),
}


class StorageFailurePolicy(Enum):
    """What the user sees when the announcement went out but storing the review failed."""

    LOG_ONLY = "LogOnly"
    SURFACE = "Surface"


@dataclass(frozen=True)
class Reviewer:
    user_id: str
    name: str
    avatar_url: str | None = None


@dataclass(frozen=True)
class VerifiedPurchase:
    transaction_id: str
    payment: PaymentRecord
    product: LineItem
    product_image: str | None


@dataclass(frozen=True)
class ReviewForm:
    product_name: str
    review_min_length: int = REVIEW_MIN_LENGTH
    review_max_length: int = REVIEW_MAX_LENGTH
    rating_max_length: int = RATING_MAX_LENGTH


@dataclass(frozen=True)
class PublishedReview:
    transaction_id: str
    product_name: str
    rating: int
    message_id: str
    review_id: str | None
    stored: bool


def parse_rating(value: str | None) -> int:
    """Accept exactly one digit from 1 to 5."""
    candidate = (value or "").strip()
    if not _RATING_PATTERN.fullmatch(candidate):
        raise InvalidRating()
    return int(candidate)


class ReviewWorkflow:
    def __init__(
        self,
        sessions: SessionStore,
        verifier: PurchaseVerifier,
        announcer: Announcer,
        on_storage_failure: StorageFailurePolicy = StorageFailurePolicy.LOG_ONLY,
    ) -> None:
        self.sessions = sessions
        self.verifier = verifier
        self.announcer = announcer
        self.on_storage_failure = on_storage_failure
        self._write_lock = threading.Lock()

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _active_session(self, user_id: str) -> ReviewSession:
        session = self.sessions.get(user_id)
        if session is None:
            raise SessionExpired()
        if self.sessions.is_expired(user_id):
            self.sessions.delete(user_id)
            logger.info("Review session expired", user_id=user_id, transaction_id=session.transaction_id)
            raise SessionExpired()
        return session

    @staticmethod
    def _assert_can_transition(session: ReviewSession, target: SessionState) -> None:
        if target not in _VALID_TRANSITIONS.get(session.state, set()):
            raise StepOutOfOrder()

    def _finish(self, user_id: str, session: ReviewSession) -> None:
        # The user may have started a new flow while this one was awaiting I/O
        current = self.sessions.get(user_id)
        if current is not None and current.transaction_id == session.transaction_id:
            self.sessions.delete(user_id)

    # Repository calls run on a worker thread; the copied context carries the domain context.
    async def _has_review(self, transaction_id: str) -> bool:
        return await asyncio.to_thread(has_review, transaction_id)

    def _record_serially(self, **fields):
        with self._write_lock:
            return record_review(**fields)

    async def _record(self, **fields):
        return await asyncio.to_thread(self._record_serially, **fields)

    async def _retract(self, message_id: str, transaction_id: str) -> None:
        try:
            await self.announcer.retract(message_id)
        except Exception:
            logger.exception("Could not retract announcement", transaction_id=transaction_id, message_id=message_id)

    async def _resolve_image(self, product: LineItem) -> str | None:
        if product.image:
            return product.image
        return await self.verifier.find_product_image(product.name)

    # -------------------------------------------------------------------
    # AwaitingTransactionId → AwaitingProductConfirmation
    # -------------------------------------------------------------------
    async def submit_transaction(self, user_id: str, transaction_id: str) -> VerifiedPurchase:
        """Verify a purchase and open a review session for it."""
        user_id = str(user_id)
        transaction_id = (transaction_id or "").strip()
        if not TRANSACTION_ID_MIN_LENGTH <= len(transaction_id) <= TRANSACTION_ID_MAX_LENGTH:
            raise InvalidTransactionId()

        if await self._has_review(transaction_id):
            logger.info("Transaction already reviewed", user_id=user_id, transaction_id=transaction_id)
            raise TransactionAlreadyUsed()

        payment = await self.verifier.verify(transaction_id)
        if payment is None:
            raise PaymentNotFound()

        product = payment.product
        if product is None:
            logger.info("Payment has no products", user_id=user_id, transaction_id=transaction_id)
            raise NoProductsFound()

        product_image = await self._resolve_image(product)

        session = self.sessions.create(user_id, transaction_id, payment)
        session.product_image = product_image
        self.sessions.save(user_id, session)

        logger.info(
            "Review session started",
            user_id=user_id,
            transaction_id=transaction_id,
            product_name=product.name,
        )
        return VerifiedPurchase(
            transaction_id=transaction_id,
            payment=payment,
            product=product,
            product_image=product_image,
        )

    # -------------------------------------------------------------------
    # AwaitingProductConfirmation → AwaitingReviewContent
    # -------------------------------------------------------------------
    def open_review_form(self, user_id: str) -> ReviewForm:
        """Move the session to content entry and describe the form to show."""
        user_id = str(user_id)
        session = self._active_session(user_id)
        self._assert_can_transition(session, SessionState.AWAITING_CONTENT)

        session.state = SessionState.AWAITING_CONTENT
        self.sessions.save(user_id, session)
        return ReviewForm(product_name=session.product.name)

    # -------------------------------------------------------------------
    # AwaitingReviewContent → Completed
    # -------------------------------------------------------------------
    async def submit_review(
        self,
        reviewer: Reviewer,
        product_name: str,
        review_text: str,
        rating_input: str,
    ) -> PublishedReview:
        """Validate the review, announce it and store it."""
        user_id = str(reviewer.user_id)
        session = self._active_session(user_id)
        self._assert_can_transition(session, SessionState.COMPLETED)

        rating = parse_rating(rating_input)

        product = session.product
        if product_name != product.name:
            logger.warning("Submitted product name differs from session", user_id=user_id, transaction_id=session.transaction_id)
            raise InvalidProductName()

        review_text = review_text or ""
        if len(review_text.strip()) < REVIEW_MIN_LENGTH or len(review_text) > REVIEW_MAX_LENGTH:
            raise InvalidReviewText()

        if await self._has_review(session.transaction_id):
            self._finish(user_id, session)
            raise TransactionAlreadyUsed()

        product_image = session.product_image or await self.verifier.find_product_image(product.name)

        message_id = await self.announcer.publish(
            ReviewAnnouncement(
                reviewer_name=reviewer.name,
                reviewer_avatar=reviewer.avatar_url,
                product_name=product.name,
                review_text=review_text,
                rating=rating,
                product_image=product_image,
            )
        )

        result = await self._record(
            transaction_id=session.transaction_id,
            payment_id=session.payment.id,
            user_id=user_id,
            user_name=reviewer.name,
            user_avatar=reviewer.avatar_url,
            product_id=product.id or "unknown",
            product_name=product.name,
            product_image=product_image,
            body=review_text,
            rating=rating,
            message_id=message_id,
        )

        if result.status is RecordStatus.CONFLICT:
            await self._retract(message_id, session.transaction_id)
            self._finish(user_id, session)
            raise TransactionAlreadyUsed()

        if result.status is RecordStatus.FAILED:
            logger.error(
                "Review announced but not stored",
                user_id=user_id,
                transaction_id=session.transaction_id,
                message_id=message_id,
                error=result.error,
            )
            if self.on_storage_failure is StorageFailurePolicy.SURFACE:
                await self._retract(message_id, session.transaction_id)
                raise ReviewFlowError()

        self._finish(user_id, session)

        logger.info(
            "Review published",
            user_id=user_id,
            transaction_id=session.transaction_id,
            message_id=message_id,
            rating=rating,
        )
        return PublishedReview(
            transaction_id=session.transaction_id,
            product_name=product.name,
            rating=rating,
            message_id=message_id,
            review_id=result.review_id,
            stored=result.status is RecordStatus.SAVED,
        )
