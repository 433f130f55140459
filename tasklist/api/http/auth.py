import uuid

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from tasklist.core.auth import get_current_account
from tasklist.core.db import get_db
from tasklist.core.errors import DuplicateEmail
from tasklist.core.security import SESSION_COOKIE
from tasklist.domains.identity.schemas import AccountResponse, Credentials, Token
from tasklist.domains.identity.services import IdentityService

router = APIRouter(prefix="/auth", tags=["authentication"])


def get_identity_service(request: Request, db: AsyncSession = Depends(get_db)) -> IdentityService:
    return IdentityService(db, request.app.state.password_hasher, request.app.state.authenticator)


@router.post("/register", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
async def register(
    credentials: Credentials,
    identity_service: IdentityService = Depends(get_identity_service)
):
    """Регистрация нового аккаунта"""
    try:
        account_id = await identity_service.register(credentials.email, credentials.raw_password)
    except DuplicateEmail as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )

    account = await identity_service.get_account(account_id)
    return AccountResponse(
        account_id=account.uuid,
        email=account.email,
        created_at=account.created_at
    )


@router.get("/login")
async def login_page():
    """Куда перенаправляются неаутентифицированные запросы браузера"""
    return {"detail": "POST email and raw_password to /auth/login to sign in"}


@router.post("/login", response_model=Token)
async def login(
    credentials: Credentials,
    request: Request,
    response: Response,
    identity_service: IdentityService = Depends(get_identity_service)
):
    """Вход, токен кладется в зашифрованную cookie"""
    token = await identity_service.login(credentials.email, credentials.raw_password)

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    authenticator = request.app.state.authenticator
    response.set_cookie(
        SESSION_COOKIE,
        authenticator.seal(token),
        max_age=int(authenticator.ttl.total_seconds()),
        httponly=True,
        secure=request.app.state.settings.cookie_secure,
        samesite="lax",
    )

    return {"access_token": token, "token_type": "bearer"}


@router.post("/logout")
async def logout(response: Response):
    """Выход: cookie удаляется, сам токен не отзывается"""
    response.delete_cookie(SESSION_COOKIE)
    return {"message": "Successfully logged out"}


@router.get("/me", response_model=AccountResponse)
async def get_current_account_info(
    account_id: uuid.UUID = Depends(get_current_account),
    identity_service: IdentityService = Depends(get_identity_service)
):
    """Данные текущего аккаунта"""
    account = await identity_service.get_account(account_id)

    if account is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return AccountResponse(
        account_id=account.uuid,
        email=account.email,
        created_at=account.created_at
    )
