"""Database models and session management for webhook trigger state.

Uses SQLAlchemy with SQLite for simplicity. Webhook secrets are encrypted
at rest using Fernet symmetric encryption.
"""

import json
import os
from datetime import datetime
from typing import List, Optional

from cryptography.fernet import Fernet
from sqlalchemy import Boolean, Column, DateTime, String, Text, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from config import get_settings
from logging_config import get_logger

logger = get_logger(__name__)

Base = declarative_base()


class WebhookState(Base):
    """Per trigger node webhook subscription state."""

    __tablename__ = "webhook_state"

    node_id = Column(String(255), primary_key=True)
    webhook_id = Column(String(255), nullable=False)
    encrypted_secret = Column(Text, nullable=False)
    owner_id = Column(String(255), nullable=False, default="")
    events = Column(Text, nullable=False, default="[]")  # JSON list of event types
    service_ids = Column(Text, nullable=False, default="[]")  # JSON list of srv- ids
    verify_signature = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<WebhookState(node_id={self.node_id}, webhook_id={self.webhook_id})>"

    @property
    def event_list(self) -> List[str]:
        return json.loads(self.events or "[]")

    @property
    def service_id_list(self) -> List[str]:
        return json.loads(self.service_ids or "[]")


# Encryption key management
_generated_key: Optional[bytes] = None


def get_encryption_key() -> bytes:
    """Get encryption key from settings.

    If not set, generates a process-lifetime key (for development only).
    In production, SECRET_ENCRYPTION_KEY must be set.
    """
    global _generated_key
    settings = get_settings()

    if settings.secret_encryption_key:
        return settings.secret_encryption_key.encode()

    if settings.environment != "production":
        if _generated_key is None:
            logger.warning(
                "SECRET_ENCRYPTION_KEY not set, generated a temporary key; "
                "stored webhook secrets will not survive a restart"
            )
            _generated_key = Fernet.generate_key()
        return _generated_key

    raise ValueError("SECRET_ENCRYPTION_KEY must be set in production")


def get_fernet() -> Fernet:
    """Get Fernet encryption instance."""
    return Fernet(get_encryption_key())


def encrypt_value(value: str) -> str:
    """Encrypt a secret value."""
    return get_fernet().encrypt(value.encode()).decode()


def decrypt_value(encrypted_value: str) -> str:
    """Decrypt a secret value."""
    return get_fernet().decrypt(encrypted_value.encode()).decode()


# Database setup
def get_database_url() -> str:
    """Get database URL from settings or default to SQLite."""
    settings = get_settings()

    if settings.database_url:
        return settings.database_url

    db_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), "webhooks.db")
    return f"sqlite:///{db_path}"


def get_engine(database_url: Optional[str] = None):
    """Get SQLAlchemy engine."""
    database_url = database_url or get_database_url()
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, connect_args=connect_args)


def get_session_local(engine=None):
    """Get session factory."""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine or get_engine())


def init_db(engine=None) -> None:
    """Initialize database tables."""
    Base.metadata.create_all(bind=engine or get_engine())


class WebhookStateStore:
    """Key/value store for webhook subscription state, keyed by node ID.

    Secrets are decrypted on read; callers never see ciphertext.
    """

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_local()

    def get(self, node_id: str) -> Optional[dict]:
        """Return the stored state for a node, or None if nothing is stored."""
        db = self._session_factory()
        try:
            row = db.get(WebhookState, node_id)
            if row is None:
                return None
            return {
                "node_id": row.node_id,
                "webhook_id": row.webhook_id,
                "webhook_secret": decrypt_value(row.encrypted_secret),
                "owner_id": row.owner_id,
                "events": row.event_list,
                "service_ids": row.service_id_list,
                "verify_signature": row.verify_signature,
            }
        finally:
            db.close()

    def save(
        self,
        node_id: str,
        webhook_id: str,
        webhook_secret: str,
        owner_id: str = "",
        events: Optional[List[str]] = None,
        service_ids: Optional[List[str]] = None,
        verify_signature: bool = True,
    ) -> None:
        """Create or replace the state for a node."""
        db = self._session_factory()
        try:
            row = db.get(WebhookState, node_id)
            if row is None:
                row = WebhookState(node_id=node_id)
                db.add(row)
            row.webhook_id = webhook_id
            row.encrypted_secret = encrypt_value(webhook_secret)
            row.owner_id = owner_id
            row.events = json.dumps(events or [])
            row.service_ids = json.dumps(service_ids or [])
            row.verify_signature = verify_signature
            db.commit()
        finally:
            db.close()

    def clear(self, node_id: str) -> None:
        """Remove any stored state for a node."""
        db = self._session_factory()
        try:
            row = db.get(WebhookState, node_id)
            if row is not None:
                db.delete(row)
                db.commit()
        finally:
            db.close()
