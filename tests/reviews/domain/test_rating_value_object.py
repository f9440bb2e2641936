"""Tests for the Rating value object."""

import pytest
from protean.exceptions import ValidationError
from reviews.review.review import Rating


class TestRating:
    @pytest.mark.parametrize("score", [1, 2, 3, 4, 5])
    def test_valid_scores(self, score):
        assert Rating(score=score).score == score

    @pytest.mark.parametrize("score", [0, 6, -1])
    def test_out_of_range_rejected(self, score):
        with pytest.raises(ValidationError) as exc:
            Rating(score=score)
        assert "Rating must be between 1 and 5" in str(exc.value)

    def test_score_is_required(self):
        with pytest.raises(ValidationError):
            Rating()

    def test_equality_by_value(self):
        assert Rating(score=4) == Rating(score=4)
        assert Rating(score=4) != Rating(score=3)
