"""API fetcher implementation for retrieving documents via the Google Docs API."""

from typing import Any, Dict, Optional

import httplib2
from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError

from docs_client import GoogleDocsClient
from .base_fetcher import BaseFetcher, FetcherError


class ApiFetcher(BaseFetcher):
    """Fetches a document through ``documents.get``."""

    def __init__(self, config: Dict[str, Any], logger=None, client: Optional[GoogleDocsClient] = None):
        """
        Initialize API fetcher, authenticating unless a client is given.

        Args:
            config: Configuration dictionary with google settings
            logger: Logger instance (optional)
            client: Prebuilt GoogleDocsClient (optional)
        """
        super().__init__(config, logger)
        self.client = client or GoogleDocsClient.from_config(config)

    def fetch_document(self, document_id: str) -> Dict[str, Any]:
        self.logger.info(f"Fetching document {document_id} from the Docs API")
        try:
            document = self.client.get_document(document_id)
        except HttpError as e:
            raise FetcherError(f"Unable to retrieve data from document {document_id}: {e}") from e
        except (OSError, httplib2.HttpLib2Error, GoogleAuthError) as e:
            raise FetcherError(f"Network error retrieving document {document_id}: {e}") from e

        return self._validate_document(document, document_id)


__all__ = ['ApiFetcher']
