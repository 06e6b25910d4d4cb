"""
Base entity classes.
"""

import uuid
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict


def new_uuid() -> str:
    """Generate a fresh entity UUID."""
    return str(uuid.uuid4())


class TimestampMixin(BaseModel):
    """Mixin for created/updated timestamps."""
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class BaseEntity(TimestampMixin):
    """
    Base for all persistent entities.

    Every entity is addressed by an opaque string UUID.
    """
    model_config = ConfigDict(
        validate_assignment=True,
        extra="ignore",  # Ignore unknown fields from older stores
        str_strip_whitespace=True,
    )

    uuid: str = Field(default_factory=new_uuid)

    def touch(self) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = datetime.now()
