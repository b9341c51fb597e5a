from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import EmailStr, Field, computed_field, field_validator

from app.models.enums import UserRole
from app.schemas.base import BaseSchema, InputSchema


class UserRetrieveSchema(BaseSchema):
    id: UUID
    first_name: str
    last_name: str
    email: str
    role: UserRole
    is_active: bool
    last_login_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class UserCreateSchema(InputSchema):
    first_name: str = Field(min_length=2, max_length=100, examples=["John"])
    last_name: str = Field(min_length=2, max_length=100, examples=["Doe"])
    email: EmailStr = Field(examples=["john.doe@example.com"])
    password: str = Field(min_length=6, examples=["SecureP@ss123"])
    role: UserRole = UserRole.USER

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()


class UserUpdateSchema(InputSchema):
    first_name: str | None = Field(default=None, min_length=2, max_length=100)
    last_name: str | None = Field(default=None, min_length=2, max_length=100)
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=6)
    role: UserRole | None = None
    is_active: bool | None = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str | None) -> str | None:
        return value.lower() if value else value


UserSortField = Literal["created_at", "email", "first_name", "last_name"]


class UserQuerySchema(BaseSchema):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)
    sort_by: UserSortField = "created_at"
    sort_order: Literal["ASC", "DESC"] = "DESC"
    role: UserRole | None = None
    search: str | None = None

    @field_validator("sort_order", mode="before")
    @classmethod
    def upper_sort_order(cls, value: str) -> str:
        return value.upper() if isinstance(value, str) else value
