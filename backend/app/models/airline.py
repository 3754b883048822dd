from sqlalchemy import Column, Integer, String, Boolean
from app.database import Base

class Airline(Base):
    __tablename__ = "airlines"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    alias = Column(String(200), nullable=True)
    iata_code = Column(String(2), index=True, nullable=True)
    icao_code = Column(String(3), index=True, nullable=True)
    callsign = Column(String(100), nullable=True)
    country = Column(String(100), nullable=True)
    active = Column(Boolean, default=True, nullable=False)
