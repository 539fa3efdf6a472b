"""
Health Check API Endpoints for Catalog Configuration
GET /api/v1/health/config - Catalog configuration health
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ...services.config.configuration_service import CATALOG_CONFIG, get_config_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/health", tags=["Health"])


class ConfigHealthResponse(BaseModel):
    """Response model for config health check"""
    config_name: str
    status: str
    version: str
    allowed_page_sizes: List[int]
    default_page_size: int
    load_policy: str


@router.get("/config", response_model=ConfigHealthResponse)
async def get_config_health():
    """
    Validate the catalog configuration

    Example:
        GET /api/v1/health/config

        Response:
        {
            "config_name": "catalog_config",
            "status": "healthy",
            "version": "1.0",
            "allowed_page_sizes": [10, 20, 50, 100],
            "default_page_size": 20,
            "load_policy": "supersede"
        }
    """
    try:
        config_service = get_config_service()
        is_valid = config_service.validate_config(CATALOG_CONFIG)
        config: Dict[str, Any] = config_service.load_config(CATALOG_CONFIG)

        return ConfigHealthResponse(
            config_name=CATALOG_CONFIG,
            status="healthy" if is_valid else "error",
            version=str(config.get("version", "N/A")),
            allowed_page_sizes=config_service.get_allowed_page_sizes(),
            default_page_size=config_service.get_default_page_size(),
            load_policy=config_service.get_load_policy(),
        )

    except Exception as e:
        logger.error(f"Config health check failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Health check failed: {str(e)}"
        )


@router.post("/config/cache/clear")
async def clear_config_cache():
    """
    Reload the catalog configuration from disk

    Example:
        POST /api/v1/health/config/cache/clear

        Response:
        {"message": "Configuration reloaded", "version": "1.0"}
    """
    try:
        config = get_config_service().reload_config(CATALOG_CONFIG)
        return {"message": "Configuration reloaded", "version": config.get("version", "N/A")}

    except Exception as e:
        logger.error(f"Failed to reload configuration: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Configuration reload failed: {str(e)}"
        )
