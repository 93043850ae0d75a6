from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from riftcoach.core.exceptions import (
    ParticipantNotFound,
    ServiceException,
    ValidationError,
)
from riftcoach.core.riot_api.errors import NotFoundError, RateLimitError
from riftcoach.features.scoring.dependencies import get_match_score_service
from riftcoach.features.scoring.roles import SCORING_VERSION
from riftcoach.features.scoring.schemas import MatchScoreResponse
from riftcoach.features.scoring.scorer import SingleMatchScorer
from riftcoach.main import app

from tests.builders import PLAYER_PUUID, build_normalized

URL = "/api/v1/matches/EUW1_1/score"


@pytest.fixture
def mock_service():
    return AsyncMock()


@pytest.fixture
def client(mock_service):
    app.dependency_overrides[get_match_score_service] = lambda: mock_service
    yield TestClient(app)
    app.dependency_overrides.clear()


def _response() -> MatchScoreResponse:
    match = build_normalized()
    return MatchScoreResponse(
        match_id=match.match_id,
        puuid=PLAYER_PUUID,
        champion_id=match.participant.champion_id,
        champion_name=match.participant.champion_name,
        role=match.role.value,
        win=match.win,
        score=SingleMatchScorer().score(match),
        scoring_version=SCORING_VERSION,
    )


def test_get_match_score(client, mock_service):
    mock_service.score_match.return_value = _response()

    response = client.get(URL, params={"puuid": PLAYER_PUUID, "region": "euw"})

    assert response.status_code == 200
    body = response.json()
    assert body["matchId"] == "EUW1_1"
    assert body["championName"] == "Ahri"
    assert body["scoringVersion"] == SCORING_VERSION
    assert set(body["score"]) >= {"overall", "grade", "insights", "improvements"}
    mock_service.score_match.assert_awaited_once_with("EUW1_1", PLAYER_PUUID, "euw")


def test_missing_puuid_rejected(client):
    response = client.get(URL, params={"region": "euw"})

    assert response.status_code == 422


@pytest.mark.parametrize(
    "error, status_code",
    [
        (ValidationError("Invalid region: xx"), 400),
        (NotFoundError("Not found", status_code=404), 404),
        (ParticipantNotFound("EUW1_1", PLAYER_PUUID), 404),
        (RateLimitError("Rate limited", status_code=429), 429),
        (ServiceException("boom"), 500),
    ],
)
def test_error_mapping(client, mock_service, error, status_code):
    mock_service.score_match.side_effect = error

    response = client.get(URL, params={"puuid": PLAYER_PUUID, "region": "xx"})

    assert response.status_code == status_code
