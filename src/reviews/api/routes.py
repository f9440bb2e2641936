"""FastAPI routes for the Reviews bounded context.

Read-only: each route runs a lookup and maps the result onto a Pydantic
schema (external contract).
"""

from fastapi import APIRouter, HTTPException
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from reviews.api.schemas import (
    ProductRatingResponse,
    ReviewListResponse,
    ReviewResponse,
    ReviewStatsResponse,
)
from reviews.projections.product_rating import ProductRating
from reviews.review.lookup import (
    review_for_transaction,
    review_stats,
    reviews_for_product,
    reviews_for_user,
)

review_router = APIRouter(prefix="/reviews", tags=["reviews"])


def _listing(reviews) -> ReviewListResponse:
    return ReviewListResponse(
        count=len(reviews),
        reviews=[ReviewResponse.from_review(review) for review in reviews],
    )


@review_router.get("/stats", response_model=ReviewStatsResponse)
async def get_review_stats() -> ReviewStatsResponse:
    """Totals, average rating and rating distribution across all reviews."""
    stats = review_stats()
    return ReviewStatsResponse(
        total=stats.total,
        average_rating=stats.average_rating,
        distribution=stats.distribution,
    )


@review_router.get("/transactions/{transaction_id}", response_model=ReviewResponse)
async def get_review_for_transaction(transaction_id: str) -> ReviewResponse:
    review = review_for_transaction(transaction_id)
    if review is None:
        raise HTTPException(status_code=404, detail=f"No review for transaction {transaction_id}")
    return ReviewResponse.from_review(review)


@review_router.get("/users/{user_id}", response_model=ReviewListResponse)
async def get_reviews_for_user(user_id: str) -> ReviewListResponse:
    """Reviews written by a Discord user, newest first."""
    return _listing(reviews_for_user(user_id))


@review_router.get("/products/{product_id}", response_model=ReviewListResponse)
async def get_reviews_for_product(product_id: str) -> ReviewListResponse:
    """Reviews of a storefront package, newest first."""
    return _listing(reviews_for_product(product_id))


@review_router.get("/products/{product_id}/rating", response_model=ProductRatingResponse)
async def get_product_rating(product_id: str) -> ProductRatingResponse:
    try:
        rating = current_domain.repository_for(ProductRating).get(product_id)
    except ObjectNotFoundError:
        raise HTTPException(status_code=404, detail=f"No ratings for product {product_id}")
    return ProductRatingResponse.from_projection(rating)
