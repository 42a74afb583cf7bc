"""Client side: REST client and the per-session swipe queue."""

from .api import ApiError, ArtSwipeClient
from .queue_controller import QueueState, SwipeDirection, SwipeQueueController

__all__ = ["ApiError", "ArtSwipeClient", "QueueState", "SwipeDirection", "SwipeQueueController"]
