"""Record a review and classify the outcome.

Persistence failures are returned, not raised, so that the caller decides
what the user sees:

- SAVED     the review is stored
- CONFLICT  another review already holds this transaction (the handler's
            pre-check, or the storage unique constraint, rejected it)
- FAILED    storage failed for some other reason
"""

from dataclasses import dataclass
from enum import Enum

import structlog
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from reviews.review.lookup import has_review
from reviews.review.submission import SubmitReview

logger = structlog.get_logger(__name__)


class RecordStatus(Enum):
    SAVED = "Saved"
    CONFLICT = "Conflict"
    FAILED = "Failed"


@dataclass(frozen=True)
class RecordResult:
    status: RecordStatus
    review_id: str | None = None
    error: str | None = None


def record_review(**fields) -> RecordResult:
    """Process a SubmitReview command built from `fields`."""
    transaction_id = fields["transaction_id"]

    try:
        review_id = current_domain.process(SubmitReview(**fields), asynchronous=False)
    except ValidationError as exc:
        if "transaction_id" in exc.messages:
            logger.info("Review rejected as duplicate", transaction_id=transaction_id)
            return RecordResult(status=RecordStatus.CONFLICT, error=str(exc.messages))
        logger.error("Review failed validation", transaction_id=transaction_id, errors=exc.messages)
        return RecordResult(status=RecordStatus.FAILED, error=str(exc.messages))
    except Exception as exc:
        # A unique-constraint violation surfaces as a storage error; the row
        # that won the race is visible afterwards.
        try:
            conflict = has_review(transaction_id)
        except Exception:
            conflict = False
        if conflict:
            logger.info("Review insert hit unique constraint", transaction_id=transaction_id)
            return RecordResult(status=RecordStatus.CONFLICT, error=str(exc))
        logger.error("Review could not be stored", transaction_id=transaction_id, error=str(exc))
        return RecordResult(status=RecordStatus.FAILED, error=str(exc))

    return RecordResult(status=RecordStatus.SAVED, review_id=review_id)
