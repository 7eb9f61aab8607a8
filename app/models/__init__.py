from app.models.secret import Secret, SecretStatus
from app.models.user import User

__all__ = ["Secret", "SecretStatus", "User"]
