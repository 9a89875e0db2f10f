from datetime import datetime

from pydantic import BaseModel, Field

from notesapp.core.db import MongoModel
from notesapp.utils import now


class User(MongoModel):
    """User domain model with credentials.

    Indexed on email - unique.
    """

    id: int = Field(alias="_id", default=0)  # Assigned by the store on create
    name: str
    email: str
    password_hash: str  # bcrypt hash
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)


class UserView(BaseModel):
    """User account information (API representation)."""

    id: int = Field(..., description="User ID")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Email address used to log in")
    created_at: datetime = Field(..., serialization_alias="createdAt", description="Creation time")
    updated_at: datetime = Field(..., serialization_alias="updatedAt", description="Last update time")

    @classmethod
    def from_domain(cls, user: User) -> "UserView":
        """Create view model from domain model."""
        return cls(id=user.id, name=user.name, email=user.email, created_at=user.created_at, updated_at=user.updated_at)
