"""Export package writing converted documents to local markdown files.

Package Structure:
- markdown_exporter: Writes ``<title>.md`` and drives the image downloads
- image_downloader: Streams each inline image to ``<object_id>.jpg``

Configuration Referenced:
- export.output_directory: Existing directory receiving all files
- export.download_images: Enable/disable the image download pass
- export.progress_bars: Show a tqdm bar while downloading images
"""

from .markdown_exporter import ExportError, MarkdownExporter
from .image_downloader import ImageDownloader

__all__ = [
    'MarkdownExporter',
    'ExportError',
    'ImageDownloader'
]
