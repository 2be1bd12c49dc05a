# Import the declarative base
from app.db.base import Base

# Import all models so they register themselves on Base.metadata.
# This allows Alembic's env.py to simply do: "from app.models.base import Base"
from app.models.shipment import LoadItem, Shipment, ShipmentLoad  # noqa: F401
