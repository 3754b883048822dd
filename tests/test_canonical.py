import logging

import pytest

from flight_data.canonical import CanonicalFlightRecord, validate_canonical
from factories import canonical


def test_valid_candidate_becomes_record():
    record = validate_canonical(canonical(isEligible=True, reason="delay", delayMinutes=200), source="test")
    assert isinstance(record, CanonicalFlightRecord)
    assert record.delay_minutes == 200
    assert record.departure_airport.iata == "CDG"


def test_record_is_immutable():
    record = validate_canonical(canonical())
    with pytest.raises(Exception):
        record.delay_minutes = 5


@pytest.mark.parametrize("field", ["name", "city", "icao", "iata"])
def test_partial_airport_is_rejected(field):
    candidate = canonical()
    del candidate["arrivalAirport"][field]
    assert validate_canonical(candidate) is None


def test_empty_airport_city_is_rejected():
    candidate = canonical()
    candidate["departureAirport"]["city"] = ""
    assert validate_canonical(candidate) is None


@pytest.mark.parametrize("field", [
    "isEligible", "reason", "delayMinutes", "arrivalDateUtc", "arrivalDateLocal",
    "departureDateUtc", "departureDateLocal", "departureAirport", "arrivalAirport",
])
def test_missing_top_level_field_is_rejected(field):
    candidate = canonical()
    del candidate[field]
    assert validate_canonical(candidate) is None


@pytest.mark.parametrize("overrides", [
    {"delayMinutes": "200"},
    {"delayMinutes": True},
    {"delayMinutes": -5},
    {"isEligible": "yes"},
    {"reason": "weather"},
    {"arrivalDateUtc": None},
    {"departureAirport": None},
])
def test_mistyped_field_is_rejected(overrides):
    assert validate_canonical(canonical(**overrides)) is None


def test_non_dict_candidate_is_rejected():
    assert validate_canonical(["not", "a", "record"]) is None


def test_rejection_is_logged(caplog):
    candidate = canonical()
    del candidate["arrivalAirport"]["city"]
    with caplog.at_level(logging.WARNING, logger="CanonicalValidator"):
        validate_canonical(candidate, source="oag")
    assert "[oag]" in caplog.text
    assert "arrivalAirport.city" in caplog.text


def test_payload_uses_camel_case_keys():
    payload = validate_canonical(canonical()).to_payload()
    assert payload["delayMinutes"] == 0
    assert payload["departureAirport"]["icao"] == "LFPG"
