"""
Auth Service - Application Layer

Account registration, sign-in and bearer-token resolution. Hashing and
token signing are injected so this module stays free of crypto libraries.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

from domain.entities.user import PASSWORD_MIN_LENGTH, User, normalize_email
from domain.exceptions.domain_exceptions import (
    EntityNotFoundError, UnauthenticatedError, ValidationFailedError
)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


@runtime_checkable
class IUserStore(Protocol):
    def add(self, user: User) -> User: ...
    def get_by_email(self, email: str) -> Optional[User]: ...
    def get_by_id(self, user_id: str) -> Optional[User]: ...
    def update_last_login(self, user: User) -> None: ...


@runtime_checkable
class IPasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, password_hash: str) -> bool: ...


@runtime_checkable
class ITokenIssuer(Protocol):
    def issue(self, user_id: str) -> str: ...
    def verify(self, token: str) -> str: ...


@dataclass
class AuthSession:
    """Result of signup / signin."""
    token: str
    user: User


class AuthService:
    def __init__(self, user_store: IUserStore, password_hasher: IPasswordHasher,
                 token_issuer: ITokenIssuer) -> None:
        self._users = user_store
        self._hasher = password_hasher
        self._tokens = token_issuer

    def signup(self, name: str, email: str, password: str) -> AuthSession:
        """
        Register a new account and sign it in.

        Raises:
            ValidationFailedError: bad name, email or password (all reported)
            DuplicateEntityError:  email already registered
        """
        errors = {}
        if not isinstance(password, str) or len(password) < PASSWORD_MIN_LENGTH:
            errors["password"] = f"Password must be at least {PASSWORD_MIN_LENGTH} characters"
        try:
            # Field checks only; the real hash is computed once input is valid
            User(name=name, email=email, password_hash="-")
        except ValidationFailedError as exc:
            errors.update(exc.errors)
        if errors:
            raise ValidationFailedError(errors)

        user = User(name=name, email=email, password_hash=self._hasher.hash(password))
        user.record_login()
        self._users.add(user)
        logger.info("User signed up", extra={"structured_context": {"user_id": user.user_id}})
        return AuthSession(token=self._tokens.issue(user.user_id), user=user)

    def signin(self, email: str, password: str) -> AuthSession:
        """
        Raises:
            UnauthenticatedError: unknown email, wrong password or inactive account
        """
        user = self._users.get_by_email(normalize_email(email))
        if user is None or not user.is_active or not self._hasher.verify(password or "", user.password_hash):
            logger.info("Sign-in rejected", extra={"structured_context": {"email": normalize_email(email)}})
            raise UnauthenticatedError(INVALID_CREDENTIALS)

        user.record_login()
        self._users.update_last_login(user)
        return AuthSession(token=self._tokens.issue(user.user_id), user=user)

    def resolve_user_id(self, token: Optional[str]) -> str:
        """
        Map a bearer token to the id of an existing, active account.

        Raises:
            UnauthenticatedError
        """
        if not token:
            raise UnauthenticatedError("Not authorized, no token")
        user_id = self._tokens.verify(token)
        user = self._users.get_by_id(user_id)
        if user is None or not user.is_active:
            raise UnauthenticatedError("Not authorized, user not found")
        return user_id

    def get_profile(self, user_id: str) -> User:
        user = self._users.get_by_id(user_id)
        if user is None:
            raise EntityNotFoundError("User")
        return user
