"""
Provider Manager — orchestrates failover across flight status providers.

Failover order:
  1. OAG (primary — schedule instances + status details)
  2. FlightStats (secondary — single status call)
  3. AeroAPI (last resort — day-window range query)

The manager tries each provider in order. If a provider is unavailable,
fails, or returns a record that does not pass canonical validation, it
falls through to the next. Providers are never retried within one
resolution.
"""
import enum
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from flight_data.canonical import CanonicalFlightRecord, FlightQuery
from flight_data.providers.base import FlightStatusProvider

logger = logging.getLogger("ProviderManager")


class ResolutionState(str, enum.Enum):
    NOT_STARTED = "not_started"
    TRYING_PROVIDER = "trying_provider"
    RESOLVED = "resolved"
    NOT_FOUND = "not_found"


class ProviderManager:
    """
    Manages multiple flight status providers with deterministic failover.

    Usage:
        manager = ProviderManager([oag, flightstats, aeroapi])
        record = await manager.resolve(FlightQuery(flight_code="1488", carrier_code="AFR", date=day))
    """

    def __init__(self, providers: Sequence[FlightStatusProvider]):
        self._providers: List[FlightStatusProvider] = list(providers)
        self._stats: Dict[str, int] = {"resolutions": 0, "not_found": 0}
        for provider in self._providers:
            self._stats[f"{provider.provider_name}_calls"] = 0
            self._stats[f"{provider.provider_name}_successes"] = 0

    @property
    def providers(self) -> List[FlightStatusProvider]:
        return list(self._providers)

    async def resolve(self, query: FlightQuery) -> Optional[CanonicalFlightRecord]:
        """First validated record in priority order, or None when every provider is exhausted."""
        _state, record = await self.resolve_with_state(query)
        return record

    async def resolve_with_state(
        self, query: FlightQuery
    ) -> Tuple[ResolutionState, Optional[CanonicalFlightRecord]]:
        """State is local to this call; concurrent resolutions never see each other's."""
        self._stats["resolutions"] += 1
        state = ResolutionState.NOT_STARTED

        for index, provider in enumerate(self._providers):
            state = ResolutionState.TRYING_PROVIDER
            logger.debug(f"[Failover] {state.value} {provider.provider_name} for {query.ident}")
            name = provider.provider_name
            self._stats[f"{name}_calls"] += 1

            try:
                record = await provider.resolve(query)
            except Exception as e:
                logger.error(f"[Failover] {name} raised for {query.ident} on {query.date}: {e}")
                record = None

            if record is not None:
                self._stats[f"{name}_successes"] += 1
                logger.info(f"[Failover] Resolved {query.ident} on {query.date} via {name}")
                return ResolutionState.RESOLVED, record

            if index + 1 < len(self._providers):
                logger.info(
                    f"[Failover] {name} empty for {query.ident}. "
                    f"Trying {self._providers[index + 1].provider_name}."
                )

        self._stats["not_found"] += 1
        logger.warning(f"[Failover] All providers exhausted for {query.ident} on {query.date}")
        return ResolutionState.NOT_FOUND, None

    def get_stats(self) -> Dict[str, Any]:
        """Return resolution statistics for logging."""
        return dict(self._stats)

    def log_summary(self):
        """Print a summary of provider usage."""
        stats = self.get_stats()
        logger.info("=" * 50)
        logger.info("PROVIDER USAGE SUMMARY")
        logger.info("=" * 50)
        for provider in self._providers:
            name = provider.provider_name
            logger.info(f"  {name:<14}{stats[f'{name}_successes']}/{stats[f'{name}_calls']} successful calls")
        logger.info(f"  Resolutions:  {stats['resolutions']}")
        logger.info(f"  Not found:    {stats['not_found']}")
        logger.info("=" * 50)
