"""File fetcher reading a saved ``documents.get`` response from disk."""

import json
from pathlib import Path
from typing import Any, Dict

from .base_fetcher import BaseFetcher, FetcherError


class FileFetcher(BaseFetcher):
    """Loads a document dump instead of calling the API; no authentication."""

    def __init__(self, config: Dict[str, Any], logger=None):
        super().__init__(config, logger)

        json_path = config.get('document', {}).get('json_path')
        if not json_path:
            raise ValueError("document.json_path is required for the file source")
        self.json_path = Path(json_path)

    def fetch_document(self, document_id: str) -> Dict[str, Any]:
        self.logger.info(f"Reading document {document_id} from {self.json_path}")
        try:
            with open(self.json_path, 'r', encoding='utf-8') as f:
                document = json.load(f)
        except (OSError, ValueError) as e:
            raise FetcherError(f"Unable to read document dump {self.json_path}: {e}") from e

        return self._validate_document(document, document_id)


__all__ = ['FileFetcher']
