"""
Read access to the resource registry.
"""

from typing import Optional

from sqlalchemy.orm import Session

from complaint_engine.models.resource.resource import Resource
from complaint_engine.repositories.base.base_repository import BaseRepository


class ResourceRepository(BaseRepository[Resource]):

    def __init__(self, db: Session):
        super().__init__(Resource, db)

    def resolve_resource(self, resource_id: str) -> Optional[Resource]:
        return self.find_by_id(resource_id)
