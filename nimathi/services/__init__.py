"""
Service layer for Nimathi

Services hold the business logic between the API routes and the kv store.
"""

from nimathi.services.container import ServiceContainer, build_container

__all__ = [
    "ServiceContainer",
    "build_container",
]
