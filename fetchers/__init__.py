"""Fetchers package for retrieving documents via the Docs API or a saved dump."""

from .base_fetcher import BaseFetcher, FetcherError
from .api_fetcher import ApiFetcher
from .file_fetcher import FileFetcher


class FetcherFactory:
    """Factory for creating fetcher instances based on configuration."""

    @staticmethod
    def create_fetcher(config: dict, logger):
        """Create appropriate fetcher based on the configured document source.

        Args:
            config: Configuration dictionary
            logger: Logger instance

        Returns:
            BaseFetcher instance (ApiFetcher or FileFetcher)

        Raises:
            ValueError: If the source is invalid
        """
        source = config.get('document', {}).get('source', 'api')

        if source == 'api':
            return ApiFetcher(config, logger)
        elif source == 'file':
            return FileFetcher(config, logger)
        else:
            raise ValueError(f"Invalid document source: {source}. Must be 'api' or 'file'.")


__all__ = [
    'BaseFetcher',
    'FetcherError',
    'ApiFetcher',
    'FileFetcher',
    'FetcherFactory'
]
