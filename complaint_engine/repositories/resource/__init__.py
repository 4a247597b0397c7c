from complaint_engine.repositories.resource.resource_repository import ResourceRepository

__all__ = ["ResourceRepository"]
