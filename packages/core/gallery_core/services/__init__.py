"""
Gallery services.

Business logic for loading feeds, publishing archives and reporting
commit statuses.
"""

from .feed_service import FeedService
from .publish_service import PublishResult, PublishService, PublishStatus
from .status_notifier import NotifyResult, StatusNotifier

__all__ = [
    "FeedService",
    "PublishService",
    "PublishResult",
    "PublishStatus",
    "StatusNotifier",
    "NotifyResult",
]
