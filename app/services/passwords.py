import bcrypt

from app.core.config import settings

# bcrypt only ever looks at the first 72 bytes of its input
_BCRYPT_MAX_BYTES = 72


def _encode(plaintext: str) -> bytes:
    return plaintext.encode()[:_BCRYPT_MAX_BYTES]


class PasswordGuard:
    """One-way password hashing for protected secrets and accounts."""

    def __init__(self, rounds: int = None):
        self.rounds = settings.PASSWORD_HASH_ROUNDS if rounds is None else rounds

    def hash(self, plaintext: str) -> str:
        return bcrypt.hashpw(_encode(plaintext), bcrypt.gensalt(rounds=self.rounds)).decode()

    def verify(self, plaintext: str, hashed: str) -> bool:
        return bcrypt.checkpw(_encode(plaintext), hashed.encode())


password_guard = PasswordGuard()
