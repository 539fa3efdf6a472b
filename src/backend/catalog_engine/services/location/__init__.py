from .location_context import LocationContext

__all__ = ["LocationContext"]
