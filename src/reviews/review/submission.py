"""SubmitReview — persist a review for a verified purchase.

Enforces one-review-per-transaction at handler level. The check and the
insert are not atomic across processes; the unique constraint on
`transaction_id` catches whatever slips between them (see
`reviews.review.recording`).
"""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Integer, String, Text
from protean.utils.globals import current_domain

from reviews.domain import reviews
from reviews.review.review import Review

ALREADY_REVIEWED_MESSAGE = "A review has already been submitted for this transaction"


@reviews.command(part_of="Review")
class SubmitReview:
    transaction_id = String(required=True, max_length=255)
    payment_id = String(max_length=255)
    user_id = String(required=True, max_length=255)
    user_name = String(required=True, max_length=255)
    user_avatar = Text()
    product_id = String(required=True, max_length=255)
    product_name = String(required=True, max_length=500)
    product_image = Text()
    body = Text(required=True)
    rating = Integer(required=True)
    message_id = String(max_length=255)


@reviews.command_handler(part_of=Review)
class SubmitReviewHandler:
    @handle(SubmitReview)
    def submit_review(self, command):
        repo = current_domain.repository_for(Review)

        existing = repo._dao.query.filter(transaction_id=command.transaction_id).all()
        if existing.items:
            raise ValidationError({"transaction_id": [ALREADY_REVIEWED_MESSAGE]})

        review = Review.submit(
            transaction_id=command.transaction_id,
            payment_id=command.payment_id,
            user_id=command.user_id,
            user_name=command.user_name,
            user_avatar=command.user_avatar,
            product_id=command.product_id,
            product_name=command.product_name,
            product_image=command.product_image,
            body=command.body,
            rating=command.rating,
            message_id=command.message_id,
        )
        repo.add(review)
        return str(review.id)
