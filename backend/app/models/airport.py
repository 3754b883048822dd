from sqlalchemy import Column, String
from app.database import Base

class Airport(Base):
    """Static reference airport, looked up by ICAO code during provider enrichment."""
    __tablename__ = "airports"

    icao_code = Column(String(4), primary_key=True, index=True) # PK acts as automatic index
    iata_code = Column(String(3), index=True, nullable=True)
    name = Column(String(200), nullable=True)
    city = Column(String(100), nullable=True)
    country = Column(String(100), nullable=True)
    timezone = Column(String(64), nullable=True)
