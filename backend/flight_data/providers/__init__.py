from flight_data.providers.base import FlightStatusProvider, MappingError, ReferenceLookup
from flight_data.providers.oag_provider import OagProvider
from flight_data.providers.flightstats_provider import FlightStatsProvider
from flight_data.providers.aeroapi_provider import AeroApiProvider
from flight_data.providers.provider_manager import ProviderManager, ResolutionState

__all__ = [
    "FlightStatusProvider",
    "MappingError",
    "ReferenceLookup",
    "OagProvider",
    "FlightStatsProvider",
    "AeroApiProvider",
    "ProviderManager",
    "ResolutionState",
]
