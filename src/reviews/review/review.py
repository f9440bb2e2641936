"""Review aggregate — the core of the Reviews domain.

A Review is a customer's rating and write-up of a product they bought,
tied to exactly one storefront transaction. Reviews are created once by
the final workflow step and are never edited or removed afterwards.

`transaction_id` is unique: the handler checks for an existing review
before adding, and the storage layer carries a unique constraint for the
race the check cannot see.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Integer, String, Text, ValueObject

from reviews.domain import reviews
from reviews.review.events import ReviewSubmitted

REVIEW_MIN_LENGTH = 10
REVIEW_MAX_LENGTH = 1000


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@reviews.value_object(part_of="Review")
class Rating:
    """A star rating from 1 to 5."""

    score = Integer(required=True)

    @invariant.post
    def score_must_be_in_range(self):
        if self.score is not None and (self.score < 1 or self.score > 5):
            raise ValidationError({"score": ["Rating must be between 1 and 5"]})


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@reviews.aggregate
class Review:
    """A verified-purchase review of a storefront product."""

    # Purchase
    transaction_id = String(required=True, max_length=255, unique=True)
    payment_id = String(max_length=255)

    # Reviewer
    user_id = String(required=True, max_length=255)
    user_name = String(required=True, max_length=255)
    user_avatar = Text()

    # Product
    product_id = String(required=True, max_length=255)
    product_name = String(required=True, max_length=500)
    product_image = Text()

    # Content
    body = Text(required=True)
    rating = ValueObject(Rating, required=True)

    # Public announcement
    message_id = String(max_length=255)

    created_at = DateTime()

    @invariant.post
    def body_length_within_bounds(self):
        if self.body is None:
            return
        if len(self.body.strip()) < REVIEW_MIN_LENGTH:
            raise ValidationError({"body": [f"Review must be at least {REVIEW_MIN_LENGTH} characters"]})
        if len(self.body) > REVIEW_MAX_LENGTH:
            raise ValidationError({"body": [f"Review cannot exceed {REVIEW_MAX_LENGTH} characters"]})

    @classmethod
    def submit(
        cls,
        transaction_id,
        user_id,
        user_name,
        product_id,
        product_name,
        body,
        rating,
        payment_id=None,
        user_avatar=None,
        product_image=None,
        message_id=None,
    ):
        """Submit a new review."""
        now = datetime.now(UTC)

        review = cls(
            transaction_id=transaction_id,
            payment_id=payment_id,
            user_id=user_id,
            user_name=user_name,
            user_avatar=user_avatar,
            product_id=product_id,
            product_name=product_name,
            product_image=product_image,
            body=body,
            rating=Rating(score=rating),
            message_id=message_id,
            created_at=now,
        )

        review.raise_(
            ReviewSubmitted(
                review_id=str(review.id),
                transaction_id=transaction_id,
                user_id=str(user_id),
                product_id=str(product_id),
                product_name=product_name,
                rating=rating,
                message_id=message_id,
                submitted_at=now,
            )
        )

        return review
