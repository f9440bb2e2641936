"""Read-side lookups over stored reviews.

`has_review` is the duplicate pre-check used by the workflow before any
storefront call. A negative answer is an optimisation only; the insert
path is what decides whether a transaction was already reviewed.
"""

from dataclasses import dataclass, field

from protean.utils.globals import current_domain

from reviews.review.review import Review

_PAGE_SIZE = 500


@dataclass(frozen=True)
class ReviewStats:
    total: int = 0
    average_rating: float = 0.0
    # Highest rating first: {5: n, 4: n, 3: n, 2: n, 1: n}
    distribution: dict[int, int] = field(default_factory=lambda: {score: 0 for score in range(5, 0, -1)})


def _query():
    return current_domain.repository_for(Review)._dao.query


def has_review(transaction_id: str) -> bool:
    return bool(_query().filter(transaction_id=transaction_id).all().items)


def review_for_transaction(transaction_id: str) -> Review | None:
    items = _query().filter(transaction_id=transaction_id).all().items
    return items[0] if items else None


def reviews_for_user(user_id: str) -> list[Review]:
    return list(_query().filter(user_id=str(user_id)).order_by("-created_at").all().items)


def reviews_for_product(product_id: str) -> list[Review]:
    return list(_query().filter(product_id=str(product_id)).order_by("-created_at").all().items)


def _all_reviews():
    offset = 0
    while True:
        page = _query().offset(offset).limit(_PAGE_SIZE).all().items
        yield from page
        if len(page) < _PAGE_SIZE:
            return
        offset += _PAGE_SIZE


def review_stats() -> ReviewStats:
    """Count, average rating and rating histogram across every review."""
    distribution = {score: 0 for score in range(5, 0, -1)}
    for review in _all_reviews():
        distribution[review.rating.score] += 1

    total = sum(distribution.values())
    if total == 0:
        return ReviewStats()

    weighted_sum = sum(score * count for score, count in distribution.items())
    return ReviewStats(
        total=total,
        average_rating=round(weighted_sum / total, 2),
        distribution=distribution,
    )
