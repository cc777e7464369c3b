"""Infrastructure Security - password hashing and bearer tokens"""
from .password_hasher import BcryptPasswordHasher
from .token_signer import TokenSigner

__all__ = ["BcryptPasswordHasher", "TokenSigner"]
