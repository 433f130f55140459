import hashlib
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from cryptography.exceptions import InvalidTag
from jose import jwe, jwt
from jose.exceptions import ExpiredSignatureError, JWEError, JWTError
from passlib.context import CryptContext

from tasklist.core.config import Settings
from tasklist.core.errors import ExpiredToken, HashingFailure, Unauthenticated

SESSION_COOKIE = "token"

# bcrypt учитывает только первые 72 байта пароля
BCRYPT_MAX_BYTES = 72


class PasswordHasher:
    """Хеширование и проверка паролей через bcrypt"""

    def __init__(self, rounds: int = 12):
        self._pwd_context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds
        )

    @staticmethod
    def _truncate(password: str) -> bytes:
        if not isinstance(password, str):
            raise TypeError("Password must be a string")
        return password.encode("utf-8")[:BCRYPT_MAX_BYTES]

    def hash(self, password: str) -> str:
        """Хеширование пароля"""
        try:
            return self._pwd_context.hash(self._truncate(password))
        except (ValueError, TypeError) as e:
            raise HashingFailure("Could not hash password") from e

    def verify(self, password: str, password_hash: str) -> bool:
        """Проверка пароля, битый хеш считается несовпадением"""
        try:
            return self._pwd_context.verify(self._truncate(password), password_hash)
        except (ValueError, TypeError):
            return False

    def dummy_verify(self) -> bool:
        """Проверка против фиктивного хеша, чтобы время ответа не зависело от наличия аккаунта"""
        return self._pwd_context.dummy_verify()


@dataclass(frozen=True)
class SessionKeys:
    """Ключи подписи и шифрования сессий, неизменяемые после старта"""

    signing_key: str
    algorithm: str
    cookie_key: bytes
    ttl: timedelta

    @classmethod
    def from_settings(cls, settings: Settings) -> "SessionKeys":
        return cls(
            signing_key=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            # A256GCM требует ровно 32 байта ключа
            cookie_key=hashlib.sha256(settings.cookie_secret.encode("utf-8")).digest(),
            ttl=timedelta(minutes=settings.session_ttl_minutes),
        )


class SessionAuthenticator:
    """Выпуск и проверка подписанных сессионных токенов"""

    def __init__(self, keys: SessionKeys):
        self._keys = keys

    @property
    def ttl(self) -> timedelta:
        return self._keys.ttl

    def issue(self, account_id: uuid.UUID, expires_delta: Optional[timedelta] = None) -> str:
        """Создание JWT токена для аккаунта"""
        issued_at = datetime.now(timezone.utc)
        expire = issued_at + (expires_delta if expires_delta is not None else self._keys.ttl)

        claims = {
            "sub": str(account_id),
            "iat": issued_at,
            "exp": expire,
        }
        return jwt.encode(claims, self._keys.signing_key, algorithm=self._keys.algorithm)

    def authenticate(self, token: Optional[str]) -> uuid.UUID:
        """Проверка подписи и срока действия токена, возвращает id аккаунта"""
        if not token:
            raise Unauthenticated("Missing session token")

        try:
            payload = jwt.decode(
                token, self._keys.signing_key, algorithms=[self._keys.algorithm]
            )
        except ExpiredSignatureError as e:
            raise ExpiredToken("Session token expired") from e
        except JWTError as e:
            raise Unauthenticated("Invalid session token") from e

        subject = payload.get("sub")
        if not subject:
            raise Unauthenticated("Session token has no subject")

        try:
            return uuid.UUID(subject)
        except (TypeError, ValueError) as e:
            raise Unauthenticated("Malformed session subject") from e

    def seal(self, token: str) -> str:
        """Шифрование токена для cookie"""
        sealed = jwe.encrypt(token, self._keys.cookie_key, algorithm="dir", encryption="A256GCM")
        return sealed.decode("ascii")

    def unseal(self, cookie_value: str) -> str:
        """Расшифровка cookie, любая подмена дает Unauthenticated"""
        try:
            return jwe.decrypt(cookie_value, self._keys.cookie_key).decode("utf-8")
        except (JWEError, InvalidTag, ValueError) as e:
            raise Unauthenticated("Invalid session cookie") from e


def extract_token_from_header(authorization: Optional[str]) -> Optional[str]:
    """Извлечение токена из заголовка Authorization"""
    if not authorization:
        return None

    parts = authorization.split()

    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None

    return parts[1]
