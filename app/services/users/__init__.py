import logging
from datetime import UTC, datetime
from uuid import UUID

from dishka import Provider, Scope, provide
from sqlalchemy import exists, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from app.models import User
from app.models.enums import UserRole
from app.schemas.users import UserCreateSchema, UserQuerySchema, UserUpdateSchema
from app.services.errors import PermissionDeniedError
from app.services.filters import FilterType, PaginatedResult, PaginatedSchema
from app.services.providers.protocols.password_encoder import IPasswordEncoder
from app.services.users.errors import (
    UserAlreadyExists,
    UserModifiedConcurrently,
    UserNotFound,
)

logger = logging.getLogger(__name__)

USER_ORDERING = {
    "created_at": User.created_at,
    "email": User.email,
    "first_name": User.first_name,
    "last_name": User.last_name,
}


class RetrieveUserInteractor:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def exists(self, query: FilterType, with_deleted: bool = False) -> bool:
        if not with_deleted:
            query = query & User.deleted_at.is_(None)
        value = await self.session.scalar(select(exists().where(query)))
        return bool(value)

    async def all(self, params: UserQuerySchema) -> PaginatedResult[User]:
        query = select(User).where(User.deleted_at.is_(None))
        if params.role:
            query = query.where(User.role == params.role)
        if params.search:
            pattern = f"%{params.search}%"
            query = query.where(
                or_(
                    User.first_name.ilike(pattern),
                    User.last_name.ilike(pattern),
                    User.email.ilike(pattern),
                )
            )
        page = PaginatedSchema(
            page=params.page,
            limit=params.limit,
            sort_by=params.sort_by,
            sort_order=params.sort_order,
        )
        return await PaginatedResult.of(
            self.session,
            query,
            page,
            ordering_mapping=USER_ORDERING,
            default_ordering=User.created_at.desc(),
        )

    async def get(self, query: FilterType) -> User | None:
        return await self.session.scalar(
            select(User).where(query, User.deleted_at.is_(None)).limit(1)
        )

    async def get_or_404(self, user_id: UUID) -> User:
        user = await self.get(User.id == user_id)
        if not user:
            raise UserNotFound(user_id)
        return user


class CreateUserInteractor:
    def __init__(
        self,
        session: AsyncSession,
        password_encoder: IPasswordEncoder,
        retrieve_user_interactor: RetrieveUserInteractor,
    ):
        self.session = session
        self.password_encoder = password_encoder
        self.retrieve_user_interactor = retrieve_user_interactor

    async def __call__(self, data: UserCreateSchema) -> User:
        # soft-deleted rows still hold their email
        if await self.retrieve_user_interactor.exists(
            User.email == data.email, with_deleted=True
        ):
            raise UserAlreadyExists()

        user = User(
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            password=self.password_encoder.hash_password(data.password),
            role=data.role,
            is_active=True,
        )
        try:
            self.session.add(user)
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise UserAlreadyExists()
        await self.session.refresh(user)

        logger.info("User created (email: %s, role: %s)", user.email, user.role)
        return user


class UpdateUserInteractor:
    def __init__(
        self,
        session: AsyncSession,
        password_encoder: IPasswordEncoder,
        retrieve_user_interactor: RetrieveUserInteractor,
    ):
        self.session = session
        self.password_encoder = password_encoder
        self.retrieve_user_interactor = retrieve_user_interactor

    @staticmethod
    def check_permissions(actor: User, user_id: UUID, data: UserUpdateSchema) -> None:
        if actor.role == UserRole.ADMIN:
            return
        if actor.id != user_id:
            raise PermissionDeniedError("You can only update your own profile")
        if data.role is not None or data.is_active is not None:
            raise PermissionDeniedError("Only administrators can change role or status")

    async def __call__(self, actor: User, user_id: UUID, data: UserUpdateSchema) -> User:
        self.check_permissions(actor, user_id, data)
        user = await self.retrieve_user_interactor.get_or_404(user_id)

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if "email" in changes and changes["email"] != user.email:
            if await self.retrieve_user_interactor.exists(
                User.email == changes["email"], with_deleted=True
            ):
                raise UserAlreadyExists()
        if "password" in changes:
            changes["password"] = self.password_encoder.hash_password(changes["password"])

        for field, value in changes.items():
            setattr(user, field, value)
        try:
            await self.session.commit()
        except StaleDataError:
            await self.session.rollback()
            raise UserModifiedConcurrently()
        except IntegrityError:
            await self.session.rollback()
            raise UserAlreadyExists()
        await self.session.refresh(user)

        logger.info("User updated (id: %s, fields: %s)", user.id, sorted(changes))
        return user


class DeleteUserInteractor:
    def __init__(
        self,
        session: AsyncSession,
        retrieve_user_interactor: RetrieveUserInteractor,
    ):
        self.session = session
        self.retrieve_user_interactor = retrieve_user_interactor

    async def __call__(self, user_id: UUID) -> None:
        user = await self.retrieve_user_interactor.get_or_404(user_id)
        user.deleted_at = datetime.now(UTC)
        try:
            await self.session.commit()
        except StaleDataError:
            await self.session.rollback()
            raise UserModifiedConcurrently()
        logger.info("User soft-deleted (id: %s)", user_id)


class TouchLastLoginInteractor:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def __call__(self, user: User) -> User:
        user.last_login_at = datetime.now(UTC)
        await self.session.commit()
        await self.session.refresh(user)
        return user


class UserServicesProvider(Provider):
    scope = Scope.REQUEST

    retrieve = provide(RetrieveUserInteractor)
    create = provide(CreateUserInteractor)
    update = provide(UpdateUserInteractor)
    delete = provide(DeleteUserInteractor)
    touch_last_login = provide(TouchLastLoginInteractor)
