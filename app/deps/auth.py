import logging

import jwt
from dishka import FromDishka, Provider, Scope, provide
from dishka.integrations.fastapi import inject
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from typing import Annotated, NewType

from app.models import User
from app.services.auth import (
    UserLoginInteractor,
    UserRegisterInteractor,
)
from app.services.users import RetrieveUserInteractor
from app.services.auth.errors import AuthenticationError, InactiveUserError
from app.services.providers.protocols.token_provider import ITokenProvider


bearer_scheme = HTTPBearer(bearerFormat="JWT", auto_error=False)
logger = logging.getLogger(__name__)


class CurrentUserFinder:
    def __init__(
        self,
        token_encoder: ITokenProvider,
        retrieve_user_interactor: RetrieveUserInteractor,
    ):
        self.token_encoder = token_encoder
        self.retrieve_user_interactor = retrieve_user_interactor

    async def __call__(self, token: HTTPAuthorizationCredentials | None) -> User:
        if not token or not token.credentials:
            raise AuthenticationError()
        try:
            principal = self.token_encoder.decode_token(token.credentials)
        except jwt.ExpiredSignatureError:
            logger.warning("JWT token has expired")
            raise AuthenticationError("Token has expired")
        except (jwt.InvalidTokenError, ValueError):
            logger.warning("Invalid JWT token")
            logger.debug("Failed to decode token", exc_info=True)
            raise AuthenticationError()
        db_user = await self.retrieve_user_interactor.get(User.id == principal.user_id)
        if not db_user:
            logger.debug("Token subject %s no longer exists", principal.user_id)
            raise AuthenticationError()
        if not db_user.is_active:
            raise InactiveUserError("User account is deactivated")
        return db_user


@inject
async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    get_user: FromDishka[CurrentUserFinder],
) -> User:
    return await get_user(credentials)


_CurrentUser = NewType("_CurrentUser", User)
CurrentUserDependency = Depends(get_current_user)
CurrentUser = Annotated[_CurrentUser, CurrentUserDependency]


class AuthServicesProvider(Provider):
    scope = Scope.REQUEST

    register = provide(UserRegisterInteractor)
    login = provide(UserLoginInteractor)
    current_user = provide(CurrentUserFinder)
