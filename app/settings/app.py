from datetime import timedelta
from typing import Literal

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix='app_', env_file='.env', extra='ignore'
    )

    name: str = 'users-api'
    env: Literal['development', 'production', 'test'] = 'development'
    debug: bool = False
    log_level: str = 'INFO'

    jwt_secret: SecretStr
    jwt_expiration: timedelta = timedelta(days=1)
    bcrypt_rounds: int = 10

    cors_origins: list[str] = ['http://localhost:3000']
    # create missing tables on startup
    db_synchronize: bool = False
