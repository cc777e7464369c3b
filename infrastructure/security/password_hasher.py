"""
Password Hasher - Infrastructure Security Layer
bcrypt-backed implementation of the IPasswordHasher Protocol
"""
import bcrypt

# bcrypt only looks at the first 72 bytes of its input
BCRYPT_MAX_BYTES = 72


class BcryptPasswordHasher:
    """Salted bcrypt hashes stored as utf-8 strings."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        password_bytes = password.encode('utf-8')[:BCRYPT_MAX_BYTES]
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password_bytes, salt).decode('utf-8')

    def verify(self, password: str, password_hash: str) -> bool:
        password_bytes = password.encode('utf-8')[:BCRYPT_MAX_BYTES]
        try:
            return bcrypt.checkpw(password_bytes, password_hash.encode('utf-8'))
        except ValueError:
            # Malformed stored hash
            return False
