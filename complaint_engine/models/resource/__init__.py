from complaint_engine.models.resource.resource import Resource

__all__ = ["Resource"]
