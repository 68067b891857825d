"""Markdown exporter writing a converted document and its images to disk."""

import logging
import stat
from pathlib import Path
from typing import Any, Dict, Optional

import requests

from converters import render_markdown
from models import Document
from .image_downloader import ImageDownloader


class ExportError(Exception):
    """Raised when the markdown file or an image cannot be written."""
    pass


class MarkdownExporter:
    """
    Writes a Document to ``<output_dir>/<title>.md`` and downloads its images.

    The output directory must already exist; it is checked once before
    anything is written. Any failure aborts the rest of the export.
    """

    def __init__(
        self,
        config: Dict[str, Any],
        logger: Optional[logging.Logger] = None,
        output_dir: Optional[str] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the markdown exporter.

        Args:
            config: Configuration dictionary with export settings
            logger: Logger instance
            output_dir: Optional output directory override (takes precedence over config)
            session: Optional HTTP session used for image downloads
        """
        self.config = config
        self.logger = logger or logging.getLogger('gdoc_markdown_exporter.exporters.markdown_exporter')
        self.session = session

        export_config = config.get('export', {})
        self.output_directory = Path(output_dir) if output_dir else Path(export_config.get('output_directory', 'tmp'))
        self.download_images_enabled = export_config.get('download_images', True)

        self.stats = {
            'markdown_path': None,
            'markdown_bytes': 0,
            'images_downloaded': 0,
            'images_size_bytes': 0
        }

    def export_document(self, document: Document) -> Dict[str, Any]:
        """
        Export a document: markdown first, then every image in order.

        Args:
            document: Converted document

        Returns:
            Statistics dictionary with export results

        Raises:
            ExportError: If the output directory is unusable or a write/download fails
        """
        self.logger.info(f"Exporting '{document.title}' to {self.output_directory}")

        self._check_output_directory()
        self.write_markdown(document)

        if self.download_images_enabled:
            self.download_images(document)
        else:
            self.logger.info("Image downloads disabled - skipping")

        return self.stats.copy()

    def _check_output_directory(self) -> None:
        try:
            info = self.output_directory.stat()
        except OSError as e:
            raise ExportError(f"Output directory is not accessible: {self.output_directory}: {e}") from e

        if not stat.S_ISDIR(info.st_mode):
            raise ExportError(f"{self.output_directory} is not directory")

        self.logger.debug(f"Output directory ready: {self.output_directory}")

    def write_markdown(self, document: Document) -> Path:
        """
        Render the document and write the markdown file.

        Args:
            document: Converted document

        Returns:
            Path of the written markdown file
        """
        markdown = render_markdown(document.elements)
        markdown_path = self.output_directory / document.markdown_filename

        try:
            with open(markdown_path, 'w', encoding='utf-8', newline='') as f:
                f.write(markdown)
        except OSError as e:
            raise ExportError(f"Failed to write markdown file {markdown_path}: {e}") from e

        self.stats['markdown_path'] = str(markdown_path)
        self.stats['markdown_bytes'] = len(markdown.encode('utf-8'))
        self.logger.info(f"Saved markdown to {markdown_path}")
        return markdown_path

    def download_images(self, document: Document) -> None:
        """Download the image of every image element, in document order."""
        downloader = ImageDownloader(
            config=self.config,
            output_dir=self.output_directory,
            session=self.session,
            logger=self.logger
        )
        images = [element.image for element in document.image_elements]

        try:
            downloader.download_all(images)
        except (requests.RequestException, OSError) as e:
            raise ExportError(f"Failed to download image: {e}") from e
        finally:
            download_stats = downloader.get_stats()
            self.stats['images_downloaded'] = download_stats['downloaded']
            self.stats['images_size_bytes'] = download_stats['total_size_bytes']


__all__ = ['MarkdownExporter', 'ExportError']
