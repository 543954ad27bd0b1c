from abc import ABC, abstractmethod


class FileStore(ABC):
    """Minimal key/value file abstraction used by the board stores."""

    @abstractmethod
    def write(self, path: str, contents: str | bytes) -> None:
        pass

    @abstractmethod
    def read(self, path: str) -> str:
        """Raises FileNotFoundError when nothing is stored at path."""

    @abstractmethod
    def list(self, path: str) -> list[str]:
        pass

    @abstractmethod
    def delete(self, path: str) -> None:
        pass
