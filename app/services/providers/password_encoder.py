from app.services.providers.protocols.password_encoder import IPasswordEncoder
from app.settings.app import AppSettings
import bcrypt


class BcryptPasswordEncoder(IPasswordEncoder):
    def __init__(self, settings: AppSettings) -> None:
        self.rounds = settings.bcrypt_rounds

    def hash_password(self, password: str) -> str:
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt(self.rounds)).decode()

    def verify(self, password: str, hashed_password: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode(), hashed_password.encode())
        except ValueError:
            # malformed hash in storage
            return False
