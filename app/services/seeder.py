import logging

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import User
from app.models.enums import UserRole
from app.services.providers.protocols.password_encoder import IPasswordEncoder
from app.services.users import RetrieveUserInteractor

logger = logging.getLogger(__name__)

DEMO_USERS = [
    {
        "first_name": "Admin",
        "last_name": "User",
        "email": "admin@example.com",
        "password": "Admin@123",
        "role": UserRole.ADMIN,
    },
    {
        "first_name": "Manager",
        "last_name": "User",
        "email": "manager@example.com",
        "password": "Manager@123",
        "role": UserRole.MANAGER,
    },
    {
        "first_name": "John",
        "last_name": "Doe",
        "email": "john.doe@example.com",
        "password": "User@123",
        "role": UserRole.USER,
    },
    {
        "first_name": "Jane",
        "last_name": "Smith",
        "email": "jane.smith@example.com",
        "password": "User@123",
        "role": UserRole.USER,
    },
]


class DatabaseSeeder:
    def __init__(
        self,
        session: AsyncSession,
        password_encoder: IPasswordEncoder,
        retrieve_user_interactor: RetrieveUserInteractor,
    ):
        self.session = session
        self.password_encoder = password_encoder
        self.retrieve_user_interactor = retrieve_user_interactor

    async def seed(self) -> list[User]:
        logger.info("Seeding users...")
        created = []
        for data in DEMO_USERS:
            if await self.retrieve_user_interactor.exists(
                User.email == data["email"], with_deleted=True
            ):
                logger.info("User already exists: %s", data["email"])
                continue
            user = User(
                **{**data, "password": self.password_encoder.hash_password(data["password"])},
                is_active=True,
            )
            self.session.add(user)
            created.append(user)
            logger.info("Created user: %s", data["email"])
        await self.session.commit()
        logger.info("Database seeding completed (%d new users)", len(created))
        return created

    async def clear(self) -> None:
        logger.warning("Clearing users table")
        await self.session.execute(delete(User))
        await self.session.commit()
