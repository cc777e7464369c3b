"""
Dependency Injection - API Layer

FastAPI dependency functions that build and cache infrastructure objects.
Process-wide singletons use lru_cache; stores are cheap wrappers around
the shared DatabaseConnection and are created per request.

Configuration comes from environment variables with defaults, so the app
starts with zero configuration for local development. Without LLM_API_KEY
every roadmap is the fallback curriculum.
"""
import os
from functools import lru_cache
from pathlib import Path
from typing import List

from fastapi import Depends

from application.services.roadmap_generator import RoadmapGenerator
from infrastructure.ai import BaseAIModel, ModelFactory
from infrastructure.logging import get_logger
from infrastructure.persistence.database.database_connection import DatabaseConnection
from infrastructure.persistence.repositories.sqlite_roadmap_repository import SqliteRoadmapRepository
from infrastructure.persistence.repositories.sqlite_user_repository import SqliteUserRepository
from infrastructure.security import BcryptPasswordHasher, TokenSigner
from infrastructure.security.token_signer import new_secret

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

def get_llm_timeout_seconds() -> float:
    return float(os.getenv("LLM_TIMEOUT_SECONDS", "30"))


def get_slow_request_threshold_ms() -> float:
    return float(os.getenv("SLOW_REQUEST_THRESHOLD_MS", "2000"))


def get_cors_origins() -> List[str]:
    raw = os.getenv("CORS_ALLOW_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()] or ["*"]


# ---------------------------------------------------------------------------
# Singletons
# ---------------------------------------------------------------------------

@lru_cache(maxsize=1)
def get_db_connection() -> DatabaseConnection:
    """
    Singleton DatabaseConnection instance.

    Reads DATABASE_URL: expects sqlite:///path/to/file.db
    Falls back to ./data/skillpath.db for local dev.
    """
    database_url = os.getenv("DATABASE_URL", "sqlite:///data/skillpath.db")

    # sqlite:///path/to/file.db  →  path/to/file.db
    if database_url.startswith("sqlite:///"):
        db_path_str = database_url[len("sqlite:///"):]
    elif database_url.startswith("sqlite://"):
        db_path_str = database_url[len("sqlite://"):]
    else:
        db_path_str = database_url

    db_path = Path(db_path_str)
    logger.info("Initialising database connection", db_path=str(db_path.absolute()))
    return DatabaseConnection(db_path=db_path)


@lru_cache(maxsize=1)
def get_language_model() -> BaseAIModel:
    """OpenAI-compatible chat model, or the always-failing stand-in."""
    model_name = os.getenv("LLM_MODEL", "gpt-4o-mini")
    model = ModelFactory().create_from_settings(
        api_key=os.getenv("LLM_API_KEY"),
        model_name=model_name,
        base_url=os.getenv("LLM_BASE_URL") or None,
        timeout=get_llm_timeout_seconds(),
    )
    logger.info("Language model ready", model=model.model_name, model_type=model.model_type.value)
    return model


@lru_cache(maxsize=1)
def get_roadmap_generator() -> RoadmapGenerator:
    return RoadmapGenerator(
        llm_client=get_language_model(),
        timeout_seconds=get_llm_timeout_seconds(),
    )


@lru_cache(maxsize=1)
def get_password_hasher() -> BcryptPasswordHasher:
    return BcryptPasswordHasher(rounds=int(os.getenv("AUTH_BCRYPT_ROUNDS", "12")))


@lru_cache(maxsize=1)
def get_token_signer() -> TokenSigner:
    """
    Signs bearer tokens with AUTH_SECRET_KEY. Without it a random per-process
    secret is used, so tokens stop working after a restart.
    """
    secret = os.getenv("AUTH_SECRET_KEY")
    if not secret:
        logger.warning("AUTH_SECRET_KEY not set; using an ephemeral signing secret")
        secret = new_secret()
    return TokenSigner(secret, ttl_days=int(os.getenv("AUTH_TOKEN_TTL_DAYS", "30")))


# ---------------------------------------------------------------------------
# Per-request stores
# ---------------------------------------------------------------------------

def get_roadmap_store(db: DatabaseConnection = Depends(get_db_connection)) -> SqliteRoadmapRepository:
    """FastAPI dependency: returns a SqliteRoadmapRepository."""
    return SqliteRoadmapRepository(db=db)


def get_user_store(db: DatabaseConnection = Depends(get_db_connection)) -> SqliteUserRepository:
    """FastAPI dependency: returns a SqliteUserRepository."""
    return SqliteUserRepository(db=db)
