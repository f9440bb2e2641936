"""Pydantic response schemas for the Reviews API.

These are separate from the Protean aggregate (anti-corruption pattern).
The API is a read-only operator surface; reviews are only ever created
through the Discord workflow.
"""

from __future__ import annotations

import json
from datetime import datetime

from pydantic import BaseModel


class ReviewResponse(BaseModel):
    review_id: str
    transaction_id: str
    payment_id: str | None = None
    user_id: str
    user_name: str
    user_avatar: str | None = None
    product_id: str
    product_name: str
    product_image: str | None = None
    body: str
    rating: int
    message_id: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_review(cls, review) -> ReviewResponse:
        return cls(
            review_id=str(review.id),
            transaction_id=review.transaction_id,
            payment_id=review.payment_id,
            user_id=review.user_id,
            user_name=review.user_name,
            user_avatar=review.user_avatar,
            product_id=review.product_id,
            product_name=review.product_name,
            product_image=review.product_image,
            body=review.body,
            rating=review.rating.score,
            message_id=review.message_id,
            created_at=review.created_at,
        )


class ReviewListResponse(BaseModel):
    count: int
    reviews: list[ReviewResponse]


class ReviewStatsResponse(BaseModel):
    total: int
    average_rating: float
    distribution: dict[int, int]


class ProductRatingResponse(BaseModel):
    product_id: str
    product_name: str | None = None
    average_rating: float
    total_reviews: int
    rating_distribution: dict[int, int]
    updated_at: datetime | None = None

    @classmethod
    def from_projection(cls, rating) -> ProductRatingResponse:
        distribution = json.loads(rating.rating_distribution or "{}")
        return cls(
            product_id=str(rating.product_id),
            product_name=rating.product_name,
            average_rating=rating.average_rating or 0.0,
            total_reviews=rating.total_reviews or 0,
            rating_distribution={score: distribution.get(str(score), 0) for score in range(5, 0, -1)},
            updated_at=rating.updated_at,
        )
