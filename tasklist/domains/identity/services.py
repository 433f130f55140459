import logging
import uuid
from typing import Optional

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from tasklist.core.errors import DuplicateEmail
from tasklist.core.security import PasswordHasher, SessionAuthenticator
from tasklist.db.repositories.account_repository import AccountRepository
from tasklist.domains.identity.entities import Account, normalize_email

logger = logging.getLogger(__name__)


class IdentityService:
    """Сервис регистрации и проверки учетных данных"""

    def __init__(
        self,
        session: AsyncSession,
        hasher: PasswordHasher,
        authenticator: Optional[SessionAuthenticator] = None
    ):
        self.session = session
        self.hasher = hasher
        self.authenticator = authenticator
        self.account_repository = AccountRepository(session)

    async def register(self, email: str, raw_password: str) -> uuid.UUID:
        """Регистрация нового аккаунта"""
        email = normalize_email(email)

        if await self.account_repository.email_exists(email):
            raise DuplicateEmail("Email already registered")

        # bcrypt медленный, не блокируем event loop
        password_hash = await run_in_threadpool(self.hasher.hash, raw_password)

        account = await self.account_repository.create(
            Account.create_account(email=email, password_hash=password_hash)
        )
        logger.info(f"Registered account {account.uuid}")
        return account.uuid

    async def verify(self, email: str, raw_password: str) -> Optional[uuid.UUID]:
        """Проверка учетных данных, возвращает id аккаунта или None"""
        account = await self.account_repository.get_by_email(normalize_email(email))

        if account is None:
            await run_in_threadpool(self.hasher.dummy_verify)
            return None

        if not await run_in_threadpool(self.hasher.verify, raw_password, account.password_hash):
            return None

        return account.uuid

    async def login(self, email: str, raw_password: str) -> Optional[str]:
        """Вход и выпуск сессионного токена"""
        account_id = await self.verify(email, raw_password)

        if account_id is None:
            logger.info("Rejected login attempt")
            return None

        logger.info(f"Account {account_id} logged in")
        return self.authenticator.issue(account_id)

    async def get_account(self, account_id: uuid.UUID) -> Optional[Account]:
        """Получение аккаунта по UUID"""
        return await self.account_repository.get_by_uuid(account_id)
