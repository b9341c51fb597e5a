from typing import Protocol


class IPasswordEncoder(Protocol):
    rounds: int

    def hash_password(self, password: str) -> str:
        ...

    def verify(self, password: str, hashed_password: str) -> bool:
        """False for a mismatch or an unreadable stored hash, never raises."""
        ...
