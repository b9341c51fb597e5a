from datetime import UTC, datetime

from app.schemas.auth import UserPrincipal
from app.services.providers.protocols.token_provider import ITokenProvider
from app.settings.app import AppSettings
import jwt


class JwtTokenProvider(ITokenProvider):
    algorithm = "HS256"

    def __init__(self, settings: AppSettings) -> None:
        self.secret_key: str = settings.jwt_secret.get_secret_value()
        self.expiration = settings.jwt_expiration

    @property
    def expires_in(self) -> int:
        return int(self.expiration.total_seconds())

    def encode_token(self, user_principal: UserPrincipal) -> str:
        issued_at = datetime.now(UTC)
        payload = user_principal.model_dump(mode="json", by_alias=True)
        payload.update(iat=issued_at, exp=issued_at + self.expiration)
        return jwt.encode(payload, key=self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str) -> UserPrincipal:
        decoded = jwt.decode(
            token,
            key=self.secret_key,
            algorithms=[self.algorithm],
            options={"require": ["exp", "sub"]},
        )
        return UserPrincipal.model_validate(decoded)
