from pydantic import BaseModel, EmailStr, Field, ConfigDict
from datetime import datetime
import uuid


class Credentials(BaseModel):
    """Схема для регистрации и входа"""
    email: EmailStr
    raw_password: str = Field(..., min_length=1, max_length=128)


class AccountResponse(BaseModel):
    """Схема для ответа с данными аккаунта"""
    account_id: uuid.UUID
    email: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Token(BaseModel):
    """Схема для JWT токена"""
    access_token: str
    token_type: str = "bearer"
