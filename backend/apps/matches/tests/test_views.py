"""
Tests for the matches API.

Tests the ingest endpoint, match detail and ingest status for:
- Bot authentication
- Error envelope
- Settlement through HTTP
"""
from unittest.mock import patch

import pytest
from django.urls import reverse
from rest_framework import status

from apps.players.models import Player
from apps.players.tests.factories import QualifiedPlayerFactory


def rounds_for(ids):
    return [
        {'imposter_discord_id': ids[0], 'winner': 'imposter', 'win_method': 'imposter_correct_guess',
         'category': 'Tiere', 'word': 'Hund'},
        {'imposter_discord_id': ids[1], 'winner': 'unschuldig', 'win_method': 'voted_out_imposter'},
    ]


@pytest.mark.django_db
class TestIngestAuthentication:
    """Tests for bot token checks."""

    def test_missing_token(self, api_client, report_payload):
        url = reverse('matches:match_ingest')
        response = api_client.post(url, report_payload(['1', '2', '3', '4']), format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data == {'ok': False, 'error': 'unauthorized'}

    def test_wrong_token(self, api_client, report_payload):
        api_client.credentials(HTTP_AUTHORIZATION='Bearer nope')
        url = reverse('matches:match_ingest')
        response = api_client.post(url, report_payload(['1', '2', '3', '4']), format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert Player.objects.count() == 0

    def test_legacy_header(self, api_client, settings, report_payload):
        """Test the X-Bot-Token header is accepted."""
        api_client.credentials(HTTP_X_BOT_TOKEN=settings.INGEST_TOKEN)
        url = reverse('matches:match_ingest')
        response = api_client.post(url, report_payload(['1', '2', '3', '4']), format='json')

        assert response.status_code == status.HTTP_201_CREATED

    def test_unconfigured_token_rejects_everything(self, api_client, settings, report_payload):
        settings.INGEST_TOKEN = ''
        api_client.credentials(HTTP_AUTHORIZATION='Bearer anything')
        url = reverse('matches:match_ingest')
        response = api_client.post(url, report_payload(['1', '2', '3', '4']), format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestMatchIngest:
    """Tests for POST /api/match/."""

    @pytest.fixture
    def url(self):
        return reverse('matches:match_ingest')

    def test_settles_casual_match(self, ingest_client, report_payload, url):
        ids = ['11', '12', '13', '14']
        response = ingest_client.post(url, report_payload(ids, rounds=rounds_for(ids)), format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['ok'] is True
        assert response.data['mode'] == 'casual'
        assert response.data['duplicate'] is False
        assert response.data['rounds_saved'] is True
        assert response.data['placement_multiplier'] == 3
        assert response.data['elo_floor'] == 300
        placements = {r['discord_id']: r['placement'] for r in response.data['results']}
        assert placements == {'11': 1.0, '13': 2.5, '14': 2.5, '12': 4.0}

    def test_replay_with_header_key(self, ingest_client, report_payload, url):
        ids = ['11', '12', '13', '14']
        payload = report_payload(ids, rounds=rounds_for(ids))

        first = ingest_client.post(url, payload, format='json', HTTP_IDEMPOTENCY_KEY='abc')
        second = ingest_client.post(url, payload, format='json', HTTP_IDEMPOTENCY_KEY='abc')

        assert first.status_code == status.HTTP_201_CREATED
        assert second.status_code == status.HTTP_200_OK
        assert second.data['duplicate'] is True
        assert second.data['match_id'] == first.data['match_id']
        assert Player.objects.get(discord_id='11').games_casual == 1

    def test_oversized_idempotency_key(self, ingest_client, report_payload, url):
        ids = ['11', '12', '13', '14']
        response = ingest_client.post(
            url, report_payload(ids, rounds=rounds_for(ids)), format='json',
            HTTP_IDEMPOTENCY_KEY='k' * 129,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'ok': False, 'error': 'invalid idempotency key', 'max_length': 128}
        assert Player.objects.count() == 0

    def test_idempotency_key_at_limit(self, ingest_client, report_payload, url):
        ids = ['11', '12', '13', '14']
        response = ingest_client.post(
            url, report_payload(ids, rounds=rounds_for(ids)), format='json',
            HTTP_IDEMPOTENCY_KEY='k' * 128,
        )

        assert response.status_code == status.HTTP_201_CREATED

    def test_wrong_player_count(self, ingest_client, report_payload, url):
        response = ingest_client.post(url, report_payload(['1', '2', '3']), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'ok': False, 'error': 'expected 4 players', 'got': 3}

    def test_unknown_mode(self, ingest_client, report_payload, url):
        response = ingest_client.post(url, report_payload(['1', '2', '3', '4'], mode='duo'), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'unknown mode:duo'

    def test_invalid_winner(self, ingest_client, report_payload, url):
        ids = ['1', '2', '3', '4']
        payload = report_payload(ids, rounds=[{'imposter_discord_id': '1', 'winner': 'nobody'}])
        response = ingest_client.post(url, payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'invalid payload'
        assert 'rounds' in response.data['details']

    def test_missing_players(self, ingest_client, url):
        response = ingest_client.post(url, {'guild_id': 'g', 'mode': 'casual'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'invalid payload'

    def test_ranked_gate(self, ingest_client, report_payload, url):
        ids = ['21', '22', '23', '24']
        for pid in ids[1:]:
            QualifiedPlayerFactory(discord_id=pid)

        response = ingest_client.post(url, report_payload(ids, mode='ranked'), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {
            'ok': False,
            'error': 'player_not_qualified_for_ranked:21',
            'required_casual': 5,
            'current_casual': 0,
        }

    def test_violation(self, ingest_client, report_payload, url):
        ids = ['31', '32', '33', '34']
        payload = report_payload(ids, violation={'type': 'afk', 'discord_id': '32'})
        response = ingest_client.post(url, payload, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['aborted'] is True
        assert response.data['aborted_reason'] == 'violation:afk'
        assert response.data['violation']['discord_id'] == '32'
        assert response.data['violation']['penalty_minutes'] == 30

    def test_unknown_violation_type(self, ingest_client, report_payload, url):
        payload = report_payload(['1', '2', '3', '4'], violation={'type': 'cheating', 'discord_id': '1'})
        response = ingest_client.post(url, payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'invalid payload'

    def test_unexpected_error_envelope(self, ingest_client, report_payload, url):
        """Test unhandled errors come back as a JSON 500."""
        with patch('apps.matches.views.MatchSettlement.settle', side_effect=RuntimeError('boom')):
            response = ingest_client.post(url, report_payload(['1', '2', '3', '4']), format='json')

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data == {'ok': False, 'error': 'internal_error'}


@pytest.mark.django_db
class TestMatchDetail:
    """Tests for GET /api/matches/<id>/."""

    def test_detail(self, api_client, ingest_client, report_payload):
        ids = ['41', '42', '43', '44']
        created = ingest_client.post(
            reverse('matches:match_ingest'), report_payload(ids, rounds=rounds_for(ids)), format='json'
        )

        url = reverse('matches:match_detail', kwargs={'pk': created.data['match_id']})
        response = api_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['mode'] == 'casual'
        assert response.data['aborted'] is False
        assert len(response.data['rounds']) == 2
        assert response.data['rounds'][0]['category'] == 'Tiere'
        assert response.data['rounds'][0]['win_method'] == 'guessed_word'
        assert response.data['rounds'][1]['winner'] == 'crew'
        assert len(response.data['results']) == 4
        assert response.data['violation'] is None

    def test_violation_detail(self, api_client, ingest_client, report_payload):
        ids = ['51', '52', '53', '54']
        created = ingest_client.post(
            reverse('matches:match_ingest'),
            report_payload(ids, violation={'type': 'left_voice', 'discord_id': '53'}),
            format='json',
        )

        url = reverse('matches:match_detail', kwargs={'pk': created.data['match_id']})
        response = api_client.get(url)

        assert response.data['aborted'] is True
        assert response.data['violation'] == created.data['violation']
        assert response.data['violation']['violations_count'] == 1

    def test_not_found(self, api_client):
        response = api_client.get(reverse('matches:match_detail', kwargs={'pk': 999}))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['ok'] is False


@pytest.mark.django_db
class TestIngestStatus:
    """Tests for GET /api/ingest/status/."""

    def test_reports_token_length(self, api_client, settings):
        settings.INGEST_TOKEN = 'secret'
        response = api_client.get(reverse('matches:ingest_status'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {
            'ok': True,
            'has_bot_ingest_token': True,
            'bot_ingest_token_length': 6,
        }
