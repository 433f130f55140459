from tasklist.domains.identity.entities import Account, normalize_email
from tasklist.domains.identity.schemas import Credentials, AccountResponse, Token

__all__ = [
    "Account", "normalize_email",
    "Credentials", "AccountResponse", "Token",
]
