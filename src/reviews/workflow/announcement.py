"""Announcement port — publishes accepted reviews to a public channel."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ReviewAnnouncement:
    reviewer_name: str
    reviewer_avatar: str | None
    product_name: str
    review_text: str
    rating: int
    product_image: str | None = None


class Announcer(ABC):
    """Abstract interface for publishing review announcements."""

    @abstractmethod
    async def publish(self, announcement: ReviewAnnouncement) -> str:
        """Post the announcement and return a reference to the posted message.

        Raises AnnouncementChannelUnavailable when the target channel is gone.
        """
        ...

    @abstractmethod
    async def retract(self, message_id: str) -> None:
        """Remove a previously published announcement."""
        ...
