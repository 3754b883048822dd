import os
import pytest

# Use test env
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("REDIS_URL", "")
os.environ.setdefault("OAG_SUBSCRIPTION_KEY", "")
os.environ.setdefault("FLIGHTSTATS_APP_ID", "")
os.environ.setdefault("FLIGHTSTATS_APP_KEY", "")
os.environ.setdefault("AEROAPI_KEY", "")

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base
from app.models.airline import Airline
from app.models.airport import Airport
from app.models import flight  # noqa: F401
from app.services.reference_service import ReferenceService


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def reference(session_factory):
    db = session_factory()
    db.add_all([
        Airport(icao_code="LFPG", iata_code="CDG", name="Charles de Gaulle", city="Paris", country="France", timezone="Europe/Paris"),
        Airport(icao_code="KJFK", iata_code="JFK", name="John F Kennedy Intl", city="New York", country="United States", timezone="America/New_York"),
        Airport(icao_code="EGLL", iata_code="LHR", name="Heathrow", city="London", country="United Kingdom", timezone="Europe/London"),
        # No city on file
        Airport(icao_code="ZZZZ", iata_code="ZZZ", name="Nowhere Field", city=None, country=None, timezone=None),
        Airline(name="Air France", iata_code="AF", icao_code="AFR", active=True),
        Airline(name="British Airways", iata_code="BA", icao_code="BAW", active=True),
        Airline(name="Defunct Air", iata_code="DX", icao_code="DXA", active=False),
    ])
    db.commit()
    db.close()
    return ReferenceService(session_factory)
