from abc import ABC, abstractmethod


class DocumentSource(ABC):
    @abstractmethod
    def fetch(self) -> str:
        """Return the raw listing document (Markdown or HTML)."""
