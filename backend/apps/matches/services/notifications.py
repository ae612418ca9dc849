"""Push settled matches to dashboard clients over the channel layer."""
import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

logger = logging.getLogger(__name__)

LEADERBOARD_GROUP = 'leaderboard'


def broadcast_match_settled(payload: dict) -> None:
    """Send a settled-match summary to everyone watching the leaderboard."""
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return

    try:
        async_to_sync(channel_layer.group_send)(
            LEADERBOARD_GROUP,
            {
                'type': 'match_settled',
                'data': payload,
            }
        )
    except Exception:
        # Match is already committed at this point
        logger.exception(f"Failed to broadcast settlement of match {payload.get('match_id')}")
