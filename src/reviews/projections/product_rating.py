"""ProductRating — aggregated rating statistics per product."""

import json

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from reviews.domain import reviews
from reviews.review.events import ReviewSubmitted
from reviews.review.review import Review


@reviews.projection
class ProductRating:
    product_id = Identifier(identifier=True, required=True)
    product_name = String(max_length=500)
    average_rating = Float(default=0.0)
    total_reviews = Integer(default=0)
    rating_distribution = Text()  # JSON: {"1": 0, "2": 0, "3": 0, "4": 0, "5": 0}
    updated_at = DateTime()


def _default_distribution():
    return json.dumps({"1": 0, "2": 0, "3": 0, "4": 0, "5": 0})


def _recalculate_average(distribution):
    total = sum(distribution.values())
    if total == 0:
        return 0.0
    weighted_sum = sum(int(rating) * count for rating, count in distribution.items())
    return round(weighted_sum / total, 2)


@reviews.projector(projector_for=ProductRating, aggregates=[Review])
class ProductRatingProjector:
    @on(ReviewSubmitted)
    def on_review_submitted(self, event):
        repo = current_domain.repository_for(ProductRating)

        try:
            pr = repo.get(event.product_id)
        except ObjectNotFoundError:
            pr = ProductRating(
                product_id=event.product_id,
                total_reviews=0,
                rating_distribution=_default_distribution(),
            )

        distribution = json.loads(pr.rating_distribution)
        rating_key = str(event.rating)
        distribution[rating_key] = distribution.get(rating_key, 0) + 1

        pr.product_name = event.product_name
        pr.total_reviews = pr.total_reviews + 1
        pr.rating_distribution = json.dumps(distribution)
        pr.average_rating = _recalculate_average(distribution)
        pr.updated_at = event.submitted_at

        repo.add(pr)
