"""Integration tests for the ProductRating projection."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from reviews.projections.product_rating import ProductRating
from reviews.review.submission import SubmitReview


def _submit(review_fields, **overrides):
    return current_domain.process(SubmitReview(**review_fields(**overrides)), asynchronous=False)


class TestProductRatingProjection:
    def test_first_review_creates_rating(self, review_fields):
        _submit(review_fields, rating=4)

        rating = current_domain.repository_for(ProductRating).get("7")
        assert rating.product_name == "VIP Rank"
        assert rating.total_reviews == 1
        assert rating.average_rating == 4.0
        assert json.loads(rating.rating_distribution)["4"] == 1
        assert rating.updated_at is not None

    def test_ratings_accumulate(self, review_fields):
        for i, score in enumerate([5, 4, 4]):
            _submit(review_fields, transaction_id=f"tbx-p000{i}", rating=score)

        rating = current_domain.repository_for(ProductRating).get("7")
        assert rating.total_reviews == 3
        assert rating.average_rating == 4.33
        assert json.loads(rating.rating_distribution) == {"1": 0, "2": 0, "3": 0, "4": 2, "5": 1}

    def test_products_tracked_separately(self, review_fields):
        _submit(review_fields, transaction_id="tbx-p0001", rating=5)
        _submit(review_fields, transaction_id="tbx-p0002", rating=1, product_id="8", product_name="MVP Rank")

        repo = current_domain.repository_for(ProductRating)
        assert repo.get("7").average_rating == 5.0
        assert repo.get("8").average_rating == 1.0

    def test_rejected_duplicate_does_not_count(self, review_fields):
        _submit(review_fields)
        with pytest.raises(ValidationError):
            _submit(review_fields, user_id="2002")

        assert current_domain.repository_for(ProductRating).get("7").total_reviews == 1

    def test_unreviewed_product_has_no_rating(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(ProductRating).get("7")
