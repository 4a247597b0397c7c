"""
Pydantic schemas for requests, responses and caller identity.
"""

from complaint_engine.schemas.principal import Principal, Role

__all__ = ["Principal", "Role"]
