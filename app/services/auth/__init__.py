import logging

from app.models import User
from app.models.enums import UserRole
from app.schemas.auth import LoginSchema, RegisterSchema
from app.schemas.users import UserCreateSchema
from app.services.auth.errors import InactiveUserError, WrongPasswordError
from app.services.providers.protocols.password_encoder import IPasswordEncoder
from app.services.users import (
    CreateUserInteractor,
    RetrieveUserInteractor,
    TouchLastLoginInteractor,
)

logger = logging.getLogger(__name__)


class UserRegisterInteractor:
    def __init__(
        self,
        create_user_interactor: CreateUserInteractor,
        touch_last_login: TouchLastLoginInteractor,
    ):
        self.create_user_interactor = create_user_interactor
        self.touch_last_login = touch_last_login

    async def __call__(self, data: RegisterSchema) -> User:
        user = await self.create_user_interactor(
            UserCreateSchema(
                first_name=data.first_name,
                last_name=data.last_name,
                email=data.email,
                password=data.password,
                role=UserRole.USER,
            )
        )
        logger.info("New user registered (email: %s)", user.email)
        return await self.touch_last_login(user)


class UserLoginInteractor:
    def __init__(
        self,
        password_encoder: IPasswordEncoder,
        retrieve_user_interactor: RetrieveUserInteractor,
        touch_last_login: TouchLastLoginInteractor,
    ):
        self.password_encoder = password_encoder
        self.retrieve_user_interactor = retrieve_user_interactor
        self.touch_last_login = touch_last_login

    async def __call__(self, data: LoginSchema) -> User:
        user = await self.retrieve_user_interactor.get(User.email == data.email)
        if not user:
            raise WrongPasswordError()

        if not user.is_active:
            raise InactiveUserError()

        if not self.password_encoder.verify(data.password, user.password):
            raise WrongPasswordError()
        logger.info("User logged in (email: %s)", user.email)
        return await self.touch_last_login(user)
