from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator
from datetime import datetime
from uuid import UUID

from quizmaster.core.base_config import BaseConfig


class UserCreate(BaseModel):
    name: str = Field(min_length=3, max_length=20)
    email: EmailStr
    password: str = Field(min_length=8)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Your passwords do not match")
        return self


class UserResponse(BaseConfig):
    id: UUID
    name: str
    email: EmailStr
    role: str
    created_at: datetime


class UserUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=3, max_length=20)


class PasswordChangeRequest(BaseModel):
    old_password: str
    new_password: str = Field(min_length=8)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self):
        if self.new_password != self.confirm_password:
            raise ValueError("Your passwords do not match")
        return self
