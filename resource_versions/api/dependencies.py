"""
API Dependencies
"""
from fastapi import Request

from resource_versions.services.storage_service import ObjectStore


def get_store(request: Request) -> ObjectStore:
    """Shared store handle built during bootstrap."""
    return request.app.state.store
