from abc import ABC, abstractmethod

from .local import LocalContract


class TokenURIGenerator(LocalContract, ABC):
    """A contract IOweYou can delegate tokenURI() to via setTokenURIAddress."""

    @abstractmethod
    def token_uri(self, token_id: int) -> str:
        ...


class StaticTokenURI(TokenURIGenerator):
    def token_uri(self, token_id: int) -> str:
        return f"Static Token URI For: {token_id}"


class PrefixTokenURI(TokenURIGenerator):
    def __init__(self, prefix: str):
        self.prefix = prefix

    def token_uri(self, token_id: int) -> str:
        return f"{self.prefix}{token_id}"
