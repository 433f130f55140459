import uuid
from datetime import datetime
from typing import Optional

from tasklist.core.clock import utcnow


def normalize_email(email: str) -> str:
    """Email сравнивается без учета регистра"""
    return email.strip().lower()


class Account:
    """Сущность аккаунта домена Identity"""

    def __init__(
        self,
        uuid: uuid.UUID,
        email: str,
        password_hash: str,
        created_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.email = email
        self.password_hash = password_hash
        self.created_at = created_at or utcnow()

    @classmethod
    def create_account(cls, email: str, password_hash: str) -> "Account":
        """Создание нового аккаунта с уже посчитанным хешем"""
        return cls(
            uuid=uuid.uuid4(),
            email=normalize_email(email),
            password_hash=password_hash
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Account):
            return False
        return self.uuid == other.uuid

    def __repr__(self) -> str:
        # хеш пароля в repr не попадает
        return f"Account(uuid={self.uuid}, email={self.email})"
