"""
Pytest configuration and shared fixtures for the Imposter stats project.

This module provides fixtures for:
- API client setup (public and bot-authenticated)
- Common player sets for settlement tests
- Match report payloads
"""
import pytest
from rest_framework.test import APIClient


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def ingest_client(settings):
    """Return an API client presenting the bot ingest token."""
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {settings.INGEST_TOKEN}')
    return client


@pytest.fixture
def four_players(db):
    """Four fresh players with no history."""
    from apps.players.tests.factories import PlayerFactory
    return [PlayerFactory(discord_id=f'10{i}') for i in range(4)]


@pytest.fixture
def qualified_players(db):
    """Four players allowed into ranked and past placement, all at 1000."""
    from apps.players.tests.factories import RankedPlayerFactory
    return [RankedPlayerFactory(discord_id=f'20{i}', elo_ranked=1000) for i in range(4)]


@pytest.fixture
def report_payload():
    """Build a match report payload for four discord ids."""
    def build(ids, mode='casual', rounds=None, **extra):
        payload = {
            'guild_id': 'guild-1',
            'mode': mode,
            'players': [{'discord_id': pid, 'display_name': f'Player {pid}'} for pid in ids],
        }
        if rounds is not None:
            payload['rounds'] = rounds
        payload.update(extra)
        return payload
    return build
