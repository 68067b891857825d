"""Image downloader streaming inline document images to the output directory."""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests
from tqdm import tqdm

from logger import ProgressTracker
from models import DocumentImage

CHUNK_SIZE = 64 * 1024


class ImageDownloader:
    """
    Downloads document images one after another.

    Each image is fetched with a plain GET against its content URI and
    streamed to ``<output_dir>/<object_id>.jpg`` whatever the served
    format is. The first failure propagates and stops the remaining
    downloads; files already written are kept.
    """

    def __init__(
        self,
        config: Dict[str, Any],
        output_dir: Path,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the image downloader.

        Args:
            config: Configuration dictionary
            output_dir: Existing directory images are written to
            session: HTTP session (a new one is created if omitted)
            logger: Logger instance
        """
        self.config = config
        self.output_dir = Path(output_dir)
        self.session = session or requests.Session()
        self.logger = logger or logging.getLogger('gdoc_markdown_exporter.exporters.image_downloader')

        self.show_progress = config.get('export', {}).get('progress_bars', True)

        self.stats = {
            'total_images': 0,
            'downloaded': 0,
            'failed': 0,
            'total_size_bytes': 0
        }

    def download_all(self, images: List[DocumentImage]) -> List[Path]:
        """
        Download every image in order.

        Args:
            images: Image metadata in document order

        Returns:
            Paths of the written files

        Raises:
            requests.RequestException: If a download fails
            OSError: If a file cannot be written
        """
        saved: List[Path] = []
        if not images:
            return saved

        with ProgressTracker(total_items=len(images), item_type='images') as tracker:
            images_iter = tqdm(
                images,
                desc="Images",
                leave=False,
                disable=not self._should_show_progress()
            )
            for image in images_iter:
                self.stats['total_images'] += 1
                try:
                    saved.append(self.download(image))
                except (requests.RequestException, OSError):
                    self.stats['failed'] += 1
                    tracker.increment(success=False)
                    raise
                tracker.increment(success=True)

        return saved

    def download(self, image: DocumentImage) -> Path:
        """
        Fetch one image and stream it to disk.

        Args:
            image: Image metadata

        Returns:
            Path of the written file
        """
        destination = self.output_dir / image.filename
        self.logger.debug(f"Downloading image '{image.object_id}' from {image.content_uri}")

        size = 0
        with self.session.get(image.content_uri, stream=True) as response:
            response.raise_for_status()
            with open(destination, 'wb') as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
                        size += len(chunk)

        self.stats['downloaded'] += 1
        self.stats['total_size_bytes'] += size
        self.logger.debug(f"Saved image '{image.object_id}' -> {destination} ({size} bytes)")
        return destination

    def _should_show_progress(self) -> bool:
        """Check if progress bars should be displayed."""
        if not self.show_progress:
            return False
        return sys.stdout.isatty()

    def get_stats(self) -> Dict[str, int]:
        """Get image download statistics."""
        return self.stats.copy()


__all__ = ['ImageDownloader']
