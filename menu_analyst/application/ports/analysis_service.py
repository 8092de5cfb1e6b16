from abc import ABC, abstractmethod

from menu_analyst.domain.entities.menu import StructuredMenu


class AnalysisServicePort(ABC):
    @abstractmethod
    async def structure_from_text(self, text: str) -> StructuredMenu:
        """
        Turn pasted menu text into a structured dish list.

        Requirements:
        - Every dish carries `name` and `price`; `description` is optional
        - The returned menu is opaque to callers and is passed back unchanged
          into `analyze` / `compare`

        Raises:
            AnalysisServiceError: on transport or parse failure
        """
        raise NotImplementedError

    @abstractmethod
    async def structure_from_image(self, image_bytes: bytes, mime_type: str) -> StructuredMenu:
        """
        Read a photographed or scanned menu and structure it.

        Same output and failure contract as `structure_from_text`.
        """
        raise NotImplementedError

    @abstractmethod
    async def analyze(self, menu: StructuredMenu, criteria: str) -> str:
        """
        Analyze a menu against free-form criteria (keywords, price range,
        dish type, a theme such as "gluten-free").

        Returns:
            Free-form analysis text (may contain markdown)
        """
        raise NotImplementedError

    @abstractmethod
    async def compare(self, menu_a: StructuredMenu, menu_b: StructuredMenu, keywords: str | None) -> str:
        """
        Compare the user's menu (`menu_a`) with a competitor's (`menu_b`).

        Args:
            keywords: Focus of the comparison, or None for a general comparison

        Returns:
            Free-form comparison text (may contain markdown)
        """
        raise NotImplementedError
