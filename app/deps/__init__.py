from dishka import AsyncContainer, Provider, Scope, make_async_container
from dishka.integrations.fastapi import FastapiProvider
from pydantic_settings import BaseSettings

from app.deps.auth import AuthServicesProvider
from app.deps.db import DbConnectionProvider
from app.services.health import HealthChecker
from app.services.providers.password_encoder import BcryptPasswordEncoder
from app.services.providers.protocols.password_encoder import IPasswordEncoder
from app.services.providers.protocols.token_provider import ITokenProvider
from app.services.providers.token_provider import JwtTokenProvider
from app.services.seeder import DatabaseSeeder
from app.services.users import UserServicesProvider
from app.settings.app import AppSettings
from app.settings.db import DatabaseSettings


class AppProvider(Provider):
    def register_settings[S: BaseSettings](
        self, settings: type[S], instance: S | None = None
    ):
        self.provide(
            lambda: instance if instance is not None else settings(),
            scope=Scope.APP,
            provides=settings,
        )


def create_container(
    app_settings: AppSettings | None = None,
    db_settings: DatabaseSettings | None = None,
) -> AsyncContainer:
    provider = AppProvider()
    provider.register_settings(AppSettings, app_settings)
    provider.register_settings(DatabaseSettings, db_settings)

    provider.provide(BcryptPasswordEncoder, provides=IPasswordEncoder, scope=Scope.APP)
    provider.provide(JwtTokenProvider, provides=ITokenProvider, scope=Scope.APP)
    provider.provide(HealthChecker, scope=Scope.REQUEST)
    provider.provide(DatabaseSeeder, scope=Scope.REQUEST)

    container = make_async_container(
        provider,
        DbConnectionProvider(),
        AuthServicesProvider(),
        UserServicesProvider(),
        FastapiProvider(),
    )
    return container
