from app.models.shipment import LoadItem, Shipment, ShipmentLoad  # noqa: F401
