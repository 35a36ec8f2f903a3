from abc import ABC, abstractmethod
from typing import Iterator


class BaseSource(ABC):
    tag: str = ''

    @abstractmethod
    def locate(self):
        """Return a handle to the latest feed instance, or None if it is absent."""

    @abstractmethod
    def read(self, handle) -> Iterator[dict]:
        """Yield raw records ({column: value}) from the located feed.

        Raises SystemicSourceFailure when the feed cannot be read at all.
        Each call starts a fresh pass over the feed.
        """

    def describe(self, handle) -> str:
        return str(handle)
