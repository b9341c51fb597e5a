from pydantic import PostgresDsn, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix='DB_', env_file='.env', extra='ignore'
    )

    host: str = 'localhost'
    port: int = 5432
    database: str = 'users_api'
    username: str = 'postgres'
    password: SecretStr = SecretStr('postgres')

    url: str | None = None
    echo: bool = False
    pool_size: int = 15
    max_overflow: int = 15

    @property
    def database_url(self) -> str:
        if self.url:
            return self.url
        return str(
            PostgresDsn.build(
                scheme="postgresql+asyncpg",
                username=self.username,
                password=self.password.get_secret_value(),
                host=self.host,
                port=self.port,
                path=self.database,
            )
        )
