"""Dependency injection for FastAPI routes."""

from functools import lru_cache

from umt_gen.config import get_settings
from umt_gen.core.catalog import CatalogService
from umt_gen.template.customizer import TemplateCustomizer


@lru_cache
def get_catalog() -> CatalogService:
    """Get the process-wide catalog service."""
    return CatalogService(get_settings())


@lru_cache
def get_customizer() -> TemplateCustomizer:
    """Get a shared (stateless) template customizer."""
    return TemplateCustomizer()
