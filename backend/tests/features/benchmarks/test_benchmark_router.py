import pytest
from fastapi.testclient import TestClient

from riftcoach.core.cache import TTLCache
from riftcoach.features.benchmarks.dependencies import get_benchmark_service
from riftcoach.features.benchmarks.repository import InMemoryBenchmarkRepository
from riftcoach.features.benchmarks.router import parse_champion_ids
from riftcoach.features.benchmarks.service import BenchmarkService
from riftcoach.main import app

from tests.builders import build_benchmark

URL = "/api/v1/champion-benchmarks"


@pytest.fixture
def client():
    repository = InMemoryBenchmarkRepository(
        [
            build_benchmark(103, "MIDDLE", tier="ALL_RANKS"),
            build_benchmark(103, "MIDDLE", tier="HIGH_ELO", games_analyzed=300),
            build_benchmark(64, "JUNGLE", tier="ALL_RANKS", games_analyzed=50),
        ]
    )
    service = BenchmarkService(repository, cache=TTLCache())
    app.dependency_overrides[get_benchmark_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_parse_champion_ids():
    assert parse_champion_ids("103, 64,abc,,7") == [103, 64, 7]
    assert parse_champion_ids("abc") == []


def test_batch_map(client):
    response = client.get(URL, params={"championIds": "103,64"})

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"103-MIDDLE", "64-JUNGLE"}
    assert body["103-MIDDLE"]["tier"] == "HIGH_ELO"
    assert body["103-MIDDLE"]["championId"] == 103


def test_batch_without_valid_ids(client):
    response = client.get(URL, params={"championIds": "abc"})

    assert response.status_code == 200
    assert response.json() == []


def test_single_champion(client):
    response = client.get(URL, params={"championId": 103})

    assert response.status_code == 200
    assert {r["tier"] for r in response.json()} == {"HIGH_ELO", "ALL_RANKS"}


def test_by_name(client):
    response = client.get(URL, params={"championName": "ahri"})

    assert response.status_code == 200
    assert len(response.json()) == 3


def test_list_all(client):
    response = client.get(URL)

    assert response.status_code == 200
    assert [r["gamesAnalyzed"] for r in response.json()] == [300, 100, 50]


def test_invalid_role_rejected(client):
    response = client.get(URL, params={"championId": 103, "role": "CARRY"})

    assert response.status_code == 422
