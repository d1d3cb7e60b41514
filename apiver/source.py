"""Contract for revision sources consumed by the history pipeline."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from types import TracebackType
from typing import Sequence

from .models import Revision


class RevisionSource(ABC):
    """Supplies an ordered, oldest-first history and a shared working directory."""

    @property
    @abstractmethod
    def working_directory(self) -> Path:
        """Directory that ``checkout`` materializes revisions into."""

    @abstractmethod
    def fetch(self) -> None:
        """Refresh remote state; raises ``FetchError``."""

    @abstractmethod
    def list_revisions(self) -> Sequence[Revision]:
        """Return revisions oldest first; raises ``SourceUnavailable``."""

    @abstractmethod
    def checkout(self, revision_hash: str) -> None:
        """Materialize ``revision_hash`` into the working directory.

        Raises ``CheckoutError``.
        """

    @abstractmethod
    def revert(self) -> None:
        """Restore the working directory to the latest state; raises ``RevertError``."""

    def cleanup(self) -> None:
        """Release any resources held by the source."""

    def __enter__(self) -> "RevisionSource":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.cleanup()


__all__ = ["RevisionSource"]
