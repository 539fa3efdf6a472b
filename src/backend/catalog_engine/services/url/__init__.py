from .url_sync import AddressBar, UrlSync

__all__ = ["AddressBar", "UrlSync"]
