"""Reviews bounded context — proof-of-purchase product reviews.

Handles review submission (one review per storefront transaction),
lookups and rating aggregation. The guided review workflow that drives
submission from Discord lives in `reviews.workflow`.
"""

from protean.domain import Domain

from reviews.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

reviews = Domain(name="reviews")
