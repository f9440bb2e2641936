"""Application tests for SubmitReview command handler."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from reviews.review.review import Review
from reviews.review.submission import ALREADY_REVIEWED_MESSAGE, SubmitReview


def _submit(review_fields, **overrides):
    return current_domain.process(SubmitReview(**review_fields(**overrides)), asynchronous=False)


class TestSubmitReviewCommand:
    def test_submit_persists_review(self, review_fields):
        review_id = _submit(review_fields)
        review = current_domain.repository_for(Review).get(review_id)
        assert review.transaction_id == "tbx-10001-a1b2"
        assert review.user_id == "1001"
        assert review.product_name == "VIP Rank"
        assert review.rating.score == 5
        assert review.message_id == "msg-000000000001"

    def test_submit_returns_review_id(self, review_fields):
        review_id = _submit(review_fields)
        assert isinstance(review_id, str)

    def test_invalid_rating_rejected(self, review_fields):
        with pytest.raises(ValidationError):
            _submit(review_fields, rating=9)

    def test_short_body_rejected(self, review_fields):
        with pytest.raises(ValidationError):
            _submit(review_fields, body="meh")


class TestOneReviewPerTransaction:
    def test_second_review_for_same_transaction_rejected(self, review_fields):
        _submit(review_fields)
        with pytest.raises(ValidationError) as exc:
            _submit(review_fields, user_id="2002", user_name="bob")
        assert ALREADY_REVIEWED_MESSAGE in exc.value.messages["transaction_id"]

    def test_same_user_can_review_other_transactions(self, review_fields):
        _submit(review_fields)
        _submit(review_fields, transaction_id="tbx-10002-c3d4")
        reviews = current_domain.repository_for(Review)._dao.query.filter(user_id="1001").all().items
        assert len(reviews) == 2
