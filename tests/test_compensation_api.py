import pytest
from fastapi.testclient import TestClient

from app.dependencies import get_eligibility_service
from app.main import app
from app.services.eligibility_service import EligibilityService
from flight_data.cache import EligibilityCache, InMemoryCacheStore
from flight_data.providers import ProviderManager
from factories import FakeProvider, canonical


@pytest.fixture
def providers():
    return {
        "oag": FakeProvider("oag"),
        "flightstats": FakeProvider("flightstats"),
        "aeroapi": FakeProvider("aeroapi"),
    }


@pytest.fixture
def client(providers, session_factory, reference):
    service = EligibilityService(
        EligibilityCache(InMemoryCacheStore(), ttl_seconds=600),
        ProviderManager(list(providers.values())),
        session_factory,
        reference,
    )
    app.dependency_overrides[get_eligibility_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


def total_calls(providers):
    return sum(p.calls for p in providers.values())


@pytest.mark.parametrize("flight_number", ["AF", "AF14888", "AF-1488", "AFR1488", "AF 1488", "", "AF١٤٨٨", "AF１４８８"])
def test_malformed_flight_number_is_rejected_before_resolution(client, providers, flight_number):
    response = client.get("/compensation/eligibility", params={"flightNumber": flight_number, "date": "2024-03-01"})
    assert response.status_code == 400
    assert total_calls(providers) == 0


@pytest.mark.parametrize("day", ["2024/03/01", "01-03-2024", "2024-3-1", "2024-02-30", "yesterday", "٢٠٢٤-٠٣-٠١"])
def test_malformed_date_is_rejected_before_resolution(client, providers, day):
    response = client.get("/compensation/eligibility", params={"flightNumber": "AF1488", "date": day})
    assert response.status_code == 400
    assert total_calls(providers) == 0


def test_missing_parameters_are_rejected(client, providers):
    assert client.get("/compensation/eligibility").status_code == 400
    assert client.get("/compensation/eligibility", params={"flightNumber": "AF1488"}).status_code == 400
    assert total_calls(providers) == 0


def test_delayed_flight_from_first_provider(client, providers):
    providers["oag"]._candidate = canonical(isEligible=True, reason="delay", delayMinutes=200)

    response = client.get("/compensation/eligibility", params={"flightNumber": "AF1488", "date": "2024-03-01"})

    assert response.status_code == 200
    body = response.json()
    assert body["isEligible"] is True
    assert body["reason"] == "delay"
    assert body["delayMinutes"] == 200
    assert body["departureDate"] == {"utc": "2024-03-01T09:00:00.000Z", "local": "2024-03-01T10:00:00.000"}
    assert body["arrivalAirport"]["iata"] == "JFK"
    assert providers["flightstats"].calls == 0


def test_cancelled_flight_from_fallback_provider(client, providers):
    providers["flightstats"]._candidate = canonical(isEligible=True, reason="cancellation", delayMinutes=0)

    body = client.get("/compensation/eligibility", params={"flightNumber": "BA117", "date": "2024-01-01"}).json()

    assert body["isEligible"] is True
    assert body["reason"] == "cancellation"
    assert providers["oag"].calls == 1


def test_unknown_flight_is_not_eligible(client, providers):
    response = client.get("/compensation/eligibility", params={"flightNumber": "XX9999", "date": "2024-01-01"})
    assert response.status_code == 200
    assert response.json() == {"isEligible": False}
    assert total_calls(providers) == 3


def test_invalid_record_falls_through_to_next_provider(client, providers):
    broken = canonical(isEligible=True, reason="delay", delayMinutes=300)
    del broken["arrivalAirport"]["city"]
    providers["oag"]._candidate = broken
    providers["aeroapi"]._candidate = canonical(isEligible=True, reason="delay", delayMinutes=240)

    body = client.get("/compensation/eligibility", params={"flightNumber": "AF1488", "date": "2024-03-01"}).json()

    assert body["delayMinutes"] == 240
    assert [p.calls for p in providers.values()] == [1, 1, 1]


def test_repeat_request_is_served_from_cache(client, providers):
    providers["oag"]._candidate = canonical(isEligible=True, reason="delay", delayMinutes=200)
    params = {"flightNumber": "AF1488", "date": "2024-03-01"}

    first = client.get("/compensation/eligibility", params=params).json()
    calls_after_first = total_calls(providers)
    second = client.get("/compensation/eligibility", params={"flightNumber": "af1488", "date": "2024-03-01"}).json()

    assert first == second
    assert total_calls(providers) == calls_after_first == 1


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"


def test_system_health_counts_stored_flights(client, providers, session_factory):
    from app.database import get_db

    def override_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_db
    providers["oag"]._candidate = canonical(isEligible=True, reason="cancellation")
    client.get("/compensation/eligibility", params={"flightNumber": "AF1488", "date": "2024-03-01"})

    body = client.get("/system-health").json()
    assert body["total_flights"] == 1
    assert body["eligible_flights"] == 1
    assert body["cancelled_flights"] == 1
