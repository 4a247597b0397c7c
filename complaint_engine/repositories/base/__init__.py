from complaint_engine.repositories.base.base_repository import BaseRepository

__all__ = ["BaseRepository"]
