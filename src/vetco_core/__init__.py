"""
VetCo Core Package

Shared backend core for the VetCo pet-health platform, used by the web
dashboard and the mobile app backends.

It includes:

- SQLAlchemy models for users, veterinarians, pets, messages, breathing-rate
  measurements, medication schedules and push tokens
- Conversation derivation over the flat message table
- Breathing-rate statistics, trend classification and species normal ranges
- The medication schedule QR payload codec
- Async repositories and request-level services
- Best-effort push notification delivery
- Configuration, logging setup and a structured exception hierarchy

Quick Start:
    >>> from vetco_core.database import create_engine, initialize_session_manager
    >>> from vetco_core.models import Participant
    >>> from vetco_core.services import MessagingService

    >>> engine = create_engine("postgresql+asyncpg://vetco@localhost/vetco")
    >>> manager = initialize_session_manager(engine)

    >>> async with manager.get_transaction() as session:
    ...     service = MessagingService(session)
    ...     conversations = await service.list_conversations(
    ...         Participant.user(owner_id)
    ...     )

Requirements:
    - Python 3.11+
    - PostgreSQL 13+ (SQLite for tests)
    - SQLAlchemy 2.0+
    - Pydantic 2.5+
"""

__version__ = "0.1.0"
__author__ = "VetCo Platform Team"
__license__ = "MIT"

from . import breathing
from . import database
from . import exceptions
from . import medication
from . import messaging
from . import models
from . import schemas
from . import utils

# Convenience imports for common usage patterns
from .breathing import compute_analytics, is_abnormal, normal_range_for
from .database import create_engine, get_session, get_transaction
from .exceptions import DatabaseException, ValidationException, VetcoException
from .medication import encode_qr_payload, parse_qr_code
from .messaging import derive_conversations, start_conversation
from .models import Message, Participant, ParticipantKind, Pet, User, Veterinarian

__all__ = [
    # Version and metadata
    "__version__",
    "__author__",
    "__license__",
    # Core modules
    "breathing",
    "database",
    "exceptions",
    "medication",
    "messaging",
    "models",
    "schemas",
    "utils",
    # Convenience imports
    "get_session",
    "get_transaction",
    "create_engine",
    "VetcoException",
    "ValidationException",
    "DatabaseException",
    "derive_conversations",
    "start_conversation",
    "compute_analytics",
    "is_abnormal",
    "normal_range_for",
    "encode_qr_payload",
    "parse_qr_code",
    "Message",
    "Participant",
    "ParticipantKind",
    "Pet",
    "User",
    "Veterinarian",
]
