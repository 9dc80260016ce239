from sqlalchemy import Column, String, Float, DateTime, Text, JSON
from datetime import datetime
from .database import Base


class EstimateRecord(Base):
    """
    One saved estimate.

    The whole estimate lives in payload (the camelCase snapshot);
    quote_number, project_name and total_cost are copied out of it so the
    list view and quote numbering never have to open the JSON.
    """
    __tablename__ = "estimates"

    id = Column(String, primary_key=True)  # UUID
    quote_number = Column(String, index=True, nullable=False)
    project_name = Column(String, default="")
    total_cost = Column(Float, default=0.0)
    payload = Column(JSON, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
