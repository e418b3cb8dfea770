"""StarkNet client: field elements, curve points, gateway types, an async gateway provider and a contract factory."""

__version__ = "0.1.0"