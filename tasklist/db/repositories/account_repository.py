import logging
import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tasklist.core.errors import DuplicateEmail, StoreError
from tasklist.db.models.account import Account as AccountModel
from tasklist.domains.identity.entities import Account

logger = logging.getLogger(__name__)


class AccountRepository:
    """Репозиторий для работы с аккаунтами"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, account: Account) -> Account:
        """Создание нового аккаунта"""
        db_account = AccountModel(
            uuid=account.uuid,
            email=account.email,
            password_hash=account.password_hash,
            created_at=account.created_at
        )

        self.session.add(db_account)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise DuplicateEmail("Email already registered")
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StoreError("Could not create account") from e

        return self._to_domain(db_account)

    async def get_by_uuid(self, account_uuid: uuid.UUID) -> Optional[Account]:
        """Получение аккаунта по UUID"""
        return await self._fetch_one(select(AccountModel).where(AccountModel.uuid == account_uuid))

    async def get_by_email(self, email: str) -> Optional[Account]:
        """Получение аккаунта по нормализованному email"""
        return await self._fetch_one(select(AccountModel).where(AccountModel.email == email))

    async def email_exists(self, email: str) -> bool:
        """Проверка существования email"""
        try:
            result = await self.session.execute(
                select(AccountModel.uuid).where(AccountModel.email == email)
            )
        except SQLAlchemyError as e:
            raise StoreError("Could not query accounts") from e
        return result.scalar_one_or_none() is not None

    async def _fetch_one(self, query) -> Optional[Account]:
        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as e:
            raise StoreError("Could not query accounts") from e
        db_account = result.scalar_one_or_none()
        return self._to_domain(db_account) if db_account else None

    def _to_domain(self, db_account: AccountModel) -> Account:
        """Преобразование модели БД в доменную сущность"""
        return Account(
            uuid=db_account.uuid,
            email=db_account.email,
            password_hash=db_account.password_hash,
            created_at=db_account.created_at
        )
