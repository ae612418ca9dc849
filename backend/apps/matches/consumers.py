"""
WebSocket consumers for live dashboard updates.
"""
from channels.generic.websocket import AsyncJsonWebsocketConsumer

from .services.notifications import LEADERBOARD_GROUP


class LeaderboardConsumer(AsyncJsonWebsocketConsumer):
    """
    Public feed of settled matches.

    Every match that settles is pushed to all connected dashboards so
    they can refresh the affected rows.
    """

    async def connect(self):
        """Join the leaderboard group."""
        await self.channel_layer.group_add(LEADERBOARD_GROUP, self.channel_name)
        await self.accept()

    async def disconnect(self, close_code):
        """Leave the leaderboard group."""
        await self.channel_layer.group_discard(LEADERBOARD_GROUP, self.channel_name)

    async def receive_json(self, content):
        """Answer keep-alive pings; the feed is otherwise one-way."""
        if content.get('type') == 'ping':
            await self.send_json({'type': 'pong'})

    async def match_settled(self, event):
        """Forward a settled match to the client."""
        await self.send_json({
            'type': 'match_settled',
            'data': event.get('data', {}),
        })
