from .query_builder import build_query, DEFAULT_CITY_ID, RESERVED_KEYS

__all__ = ["build_query", "DEFAULT_CITY_ID", "RESERVED_KEYS"]
