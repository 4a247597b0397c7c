from complaint_engine.models.user.user import User

__all__ = ["User"]
