"""Domain events for the Review aggregate.

Events are versioned, immutable facts. ReviewSubmitted feeds the
ProductRating projection.
"""

from protean.fields import DateTime, Identifier, Integer, String

from reviews.domain import reviews


@reviews.event(part_of="Review")
class ReviewSubmitted:
    """A customer submitted a review for a verified purchase."""

    __version__ = 1

    review_id = Identifier(required=True)
    transaction_id = String(required=True)
    user_id = String(required=True)
    product_id = String(required=True)
    product_name = String(required=True)
    rating = Integer(required=True)
    message_id = String()
    submitted_at = DateTime(required=True)
