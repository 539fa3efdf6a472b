"""
Configuration Service
Centralized catalog configuration management with caching
"""

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

CATALOG_CONFIG = "catalog_config"


class ConfigurationService:
    """
    Centralized service for loading and caching catalog configuration

    Loads configurations from JSON files in the config directory with:
    - LRU caching
    - Typed accessors with documented fallbacks
    - Hot-reload capability
    """

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize ConfigurationService

        Args:
            config_dir: Path to configuration directory. If None, uses catalog_engine/config
        """
        if config_dir is None:
            self.config_dir = Path(__file__).parent.parent.parent / "config"
        else:
            self.config_dir = Path(config_dir)

        logger.info(f"ConfigurationService initialized with config_dir: {self.config_dir}")

    @lru_cache(maxsize=32)
    def load_config(self, config_name: str) -> Dict[str, Any]:
        """
        Load configuration from JSON file with caching

        Args:
            config_name: Name of config file (without .json extension)

        Returns:
            Dict containing configuration data

        Raises:
            FileNotFoundError: If config file not found
            json.JSONDecodeError: If config file is invalid JSON
        """
        config_path = self.config_dir / f"{config_name}.json"

        if not config_path.exists():
            logger.error(f"Config file not found: {config_name}.json")
            raise FileNotFoundError(f"Config file not found: {config_path}")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in {config_name}.json: {e}")
            raise

        logger.info(f"Loaded config: {config_name} (version: {config.get('version', 'N/A')})")
        return config

    def reload_config(self, config_name: str) -> Dict[str, Any]:
        """Force reload of configuration (clears cache)"""
        self.load_config.cache_clear()
        logger.info(f"Cache cleared, reloading config: {config_name}")
        return self.load_config(config_name)

    def _section(self, name: str) -> Dict[str, Any]:
        return self.load_config(CATALOG_CONFIG).get(name, {})

    # Listing

    def get_allowed_page_sizes(self) -> List[int]:
        return list(self._section("listing").get("allowed_page_sizes", [10, 20, 50, 100]))

    def get_default_page_size(self) -> int:
        return int(self._section("listing").get("default_page_size", 20))

    def get_default_sort(self) -> str:
        return self._section("listing").get("default_sort", "relevance")

    def get_default_view_mode(self) -> str:
        return self._section("listing").get("default_view_mode", "grid")

    def get_default_display_density(self) -> str:
        return self._section("listing").get("default_display_density", "grid")

    def get_debounce_seconds(self) -> float:
        """Quiescence window for typed search input, in seconds"""
        return self._section("listing").get("debounce_ms", 300) / 1000.0

    def get_pagination_window(self) -> int:
        return int(self._section("listing").get("pagination_window", 5))

    def get_load_policy(self) -> str:
        return self._section("listing").get("load_policy", "supersede")

    # Sorting

    def get_sort_vocabulary(self) -> List[str]:
        return list(self._section("sorting").get("vocabulary", []))

    def get_table_sort_map(self) -> Dict[str, str]:
        """
        Map table column names to sort keys

        Columns absent from the map sort by their raw column name.
        """
        return dict(self._section("sorting").get("table_columns", {}))

    def get_price_column(self) -> str:
        return self._section("sorting").get("price_column", "base_price")

    # Location

    def get_default_city_id(self) -> int:
        return int(self._section("location").get("default_city_id", 1))

    # Filters and display

    def get_filter_labels(self) -> Dict[str, str]:
        return dict(self._section("filters").get("labels", {}))

    def get_query_label(self) -> str:
        return self._section("filters").get("query_label", "Search")

    def get_display_settings(self) -> Dict[str, Any]:
        return dict(self._section("display"))

    def get_message(self, key: str, **kwargs) -> str:
        """
        Get a user-facing message by key

        Args:
            key: Message key (e.g., "cart_added")
            **kwargs: Template values

        Returns:
            Formatted message, or the key itself when not configured
        """
        template = self._section("messages").get(key)
        if template is None:
            logger.warning(f"Message '{key}' not found in config")
            return key
        return template.format(**kwargs) if kwargs else template

    def validate_config(self, config_name: str = CATALOG_CONFIG) -> bool:
        """
        Validate configuration file

        Returns:
            True if valid, False otherwise
        """
        try:
            config = self.load_config(config_name)
        except (FileNotFoundError, json.JSONDecodeError) as e:
            logger.error(f"Config validation failed for {config_name}: {e}")
            return False

        if "version" not in config:
            logger.warning(f"Config {config_name} missing version field")

        listing = config.get("listing", {})
        allowed = listing.get("allowed_page_sizes", [])
        default_size = listing.get("default_page_size")
        if allowed and default_size not in allowed:
            logger.error(f"Default page size {default_size} is not in allowed set {allowed}")
            return False

        logger.info(f"Config {config_name} validated successfully")
        return True


# Global singleton instance
_config_service: Optional[ConfigurationService] = None


def get_config_service() -> ConfigurationService:
    """
    Get global ConfigurationService singleton instance

    Returns:
        ConfigurationService instance
    """
    global _config_service
    if _config_service is None:
        _config_service = ConfigurationService()
    return _config_service


def init_config_service(config_dir: Optional[str] = None) -> ConfigurationService:
    """
    Initialize global ConfigurationService with custom config directory

    Args:
        config_dir: Path to configuration directory

    Returns:
        ConfigurationService instance
    """
    global _config_service
    _config_service = ConfigurationService(config_dir)
    logger.info("Global ConfigurationService initialized")
    return _config_service
