"""
Base model class for all SQLAlchemy models in the vetco-core package.

Every table gets a UUID primary key and UTC creation/update timestamps. The
generic ``Uuid`` type maps to native UUID on PostgreSQL and CHAR(32) on
SQLite, so the same models back production and the test suite.

Example:
    >>> import uuid
    >>> from vetco_core.models import Pet

    >>> pet = Pet(owner_id=uuid.uuid4(), name=" Buddy ", species="Dog")
    >>> pet.to_dict()["name"]
    'Buddy'
    >>> pet.update_fields(age=4)
    >>> Pet.get_table_name()
    'pets'
"""

import uuid
from datetime import datetime
from typing import Any, Dict

from sqlalchemy import DateTime, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func

from ..utils.datetime_utils import get_current_utc


class Base(DeclarativeBase):
    """
    Base declarative class for all SQLAlchemy models.

    Attributes:
        type_annotation_map: Maps Python types to SQLAlchemy column types
    """

    type_annotation_map = {
        uuid.UUID: Uuid(as_uuid=True),
        datetime: DateTime(timezone=True),
    }


class BaseModel(Base):
    """
    Abstract base model providing the id and audit timestamps.

    Attributes:
        id (UUID): Primary key, generated client-side with uuid4
        created_at (datetime): When the row was inserted (UTC)
        updated_at (datetime): When the row was last modified (UTC)
    """

    __abstract__ = True

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=get_current_utc,
        server_default=func.now(),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=get_current_utc,
        server_default=func.now(),
        onupdate=get_current_utc,
    )

    def __init__(self, **kwargs: Any) -> None:
        # Assign the primary key eagerly so unsaved instances can be grouped
        # and compared before a flush.
        kwargs.setdefault("id", uuid.uuid4())
        super().__init__(**kwargs)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id})>"

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the column values to JSON-serializable types.

        Datetimes become ISO strings and UUIDs become strings; everything
        else is returned unchanged.

        Returns:
            Dictionary with column names as keys
        """
        result: Dict[str, Any] = {}
        for column in self.__table__.columns:
            value = getattr(self, column.key)
            if isinstance(value, datetime):
                result[column.key] = value.isoformat()
            elif isinstance(value, uuid.UUID):
                result[column.key] = str(value)
            else:
                result[column.key] = value
        return result

    @classmethod
    def get_table_name(cls) -> str:
        """Get the database table name for this model."""
        return cls.__tablename__

    def update_fields(self, **kwargs: Any) -> None:
        """
        Update multiple attributes at once.

        Raises:
            AttributeError: If any field name doesn't exist on the model
        """
        for field, value in kwargs.items():
            if hasattr(self, field):
                setattr(self, field, value)
            else:
                raise AttributeError(
                    f"'{self.__class__.__name__}' has no attribute '{field}'"
                )
