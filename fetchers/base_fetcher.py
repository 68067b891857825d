"""Abstract base fetcher interface and common functionality."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict


class FetcherError(Exception):
    """Base exception for fetcher-related errors."""
    pass


class BaseFetcher(ABC):
    """Abstract base class for document fetchers."""

    def __init__(self, config: Dict[str, Any], logger=None):
        """
        Initialize base fetcher with configuration and logger.

        Args:
            config: Configuration dictionary
            logger: Logger instance (optional, uses module logger if not provided)
        """
        self.config = config
        self.logger = logger or logging.getLogger('gdoc_markdown_exporter.fetcher')

    @abstractmethod
    def fetch_document(self, document_id: str) -> Dict[str, Any]:
        """
        Fetch the structured representation of one document.

        Args:
            document_id: Document identifier

        Returns:
            Document structure (title, body.content, inlineObjects)

        Raises:
            FetcherError: If the document cannot be retrieved
        """
        pass

    def _validate_document(self, document: Any, document_id: str) -> Dict[str, Any]:
        """Check that a fetched payload is at least a mapping."""
        if not isinstance(document, dict):
            raise FetcherError(
                f"Unexpected payload for document {document_id}: {type(document).__name__}"
            )

        self.logger.info(f"The title of the doc is: {document.get('title', '')}")
        self.logger.debug(f"Inline objects: {sorted((document.get('inlineObjects') or {}).keys())}")
        return document


__all__ = ['BaseFetcher', 'FetcherError']
