import uuid

from sqlalchemy import Column, Text, TIMESTAMP, Uuid

from .base import Base, JSONType, utcnow


class Tenant(Base):
    __tablename__ = 'tenants'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    # Feature flags granted by the tenant's plan, e.g. ["matchEngineSchedule"]
    features = Column(JSONType, nullable=False, default=list)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
