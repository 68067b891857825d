"""Google Docs API client built on cached OAuth credentials."""

import logging
import time
from typing import Any, Callable, Dict, List, Optional

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from auth import load_credentials
from config_loader import DEFAULT_CONFIG

logger = logging.getLogger('gdoc_markdown_exporter.client')


class GoogleDocsClient:
    """Read-only Google Docs client. One request per call, no retries."""

    def __init__(self, credentials: Credentials, service: Optional[Any] = None):
        """
        Initialize the client.

        Args:
            credentials: Authorized OAuth credentials
            service: Optional prebuilt Docs service resource
        """
        self.credentials = credentials
        self.service = service or build('docs', 'v1', credentials=credentials, cache_discovery=False)
        logger.debug("Docs v1 service ready")

    def get_document(self, document_id: str) -> Dict[str, Any]:
        """
        Fetch the structured representation of a document.

        Args:
            document_id: Google Docs document identifier

        Returns:
            ``documents.get`` response as a dictionary

        Raises:
            googleapiclient.errors.HttpError: For API errors
        """
        start_time = time.time()
        logger.debug(f"API Request: documents.get {document_id}")

        document = self.service.documents().get(documentId=document_id).execute()

        elapsed = time.time() - start_time
        logger.debug(f"API Response: documents.get {document_id} ({elapsed:.3f}s)")
        return document

    @classmethod
    def from_config(
        cls,
        config: Dict[str, Any],
        input_func: Callable[[], str] = input
    ) -> 'GoogleDocsClient':
        """
        Authenticate and build a client from the configuration dictionary.

        Args:
            config: Configuration dictionary with google settings
            input_func: Callable returning the authorization code line

        Returns:
            GoogleDocsClient instance
        """
        google_config = config.get('google', {})
        defaults = DEFAULT_CONFIG['google']
        scopes: List[str] = google_config.get('scopes') or defaults['scopes']

        credentials = load_credentials(
            client_secret_file=google_config.get('client_secret_file', defaults['client_secret_file']),
            token_file=google_config.get('token_file', defaults['token_file']),
            scopes=scopes,
            input_func=input_func
        )
        return cls(credentials)


__all__ = ['GoogleDocsClient']
