from typing import Protocol


class PasswordHasher(Protocol):
    def hash(self, plain: str) -> str:
        ...

    def verify(self, plain: str, digest: str) -> bool:
        ...
