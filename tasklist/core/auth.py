import logging
import uuid

from fastapi import HTTPException, Request, status

from tasklist.core.errors import AuthError, ExpiredToken, Unauthenticated
from tasklist.core.security import SESSION_COOKIE, extract_token_from_header

logger = logging.getLogger(__name__)

LOGIN_PATH = "/auth/login"


def wants_html(request: Request) -> bool:
    """Запрос пришел из браузера, а не от API-клиента"""
    return "text/html" in request.headers.get("accept", "")


def _reject(request: Request, error: AuthError) -> HTTPException:
    if wants_html(request):
        return HTTPException(
            status_code=status.HTTP_303_SEE_OTHER,
            detail="Login required",
            headers={"Location": LOGIN_PATH},
        )

    detail = "Session expired" if isinstance(error, ExpiredToken) else "Could not validate credentials"
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_account(request: Request) -> uuid.UUID:
    """Зависимость: id аккаунта из cookie сессии или заголовка Authorization"""
    authenticator = request.app.state.authenticator

    cookie = request.cookies.get(SESSION_COOKIE)
    header_token = extract_token_from_header(request.headers.get("authorization"))

    try:
        if cookie:
            try:
                return authenticator.authenticate(authenticator.unseal(cookie))
            except AuthError:
                # устаревший cookie не мешает явному заголовку
                if header_token is None:
                    raise

        if header_token is None:
            raise Unauthenticated("Missing session token")

        return authenticator.authenticate(header_token)
    except AuthError as e:
        logger.debug(f"Rejected request to {request.url.path}: {e}")
        raise _reject(request, e)
