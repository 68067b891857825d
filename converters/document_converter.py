"""Converter from the Google Docs document structure to renderable elements."""

import logging
from typing import Any, Dict, List, Optional

from models import (
    Document,
    DocumentImage,
    Element,
    HeadingElement,
    ImageElement,
    TextElement
)

TITLE_STYLE = 'TITLE'


class DocumentConverter:
    """
    Walks a fetched document and builds the flat element sequence.

    The walk is lossy: structural blocks other than paragraphs, runs other
    than text runs and inline objects, and inline objects that do not
    resolve to image properties are dropped. Each drop is logged at DEBUG
    level and counted in ``Document.conversion_metadata``; none of them
    raise.
    """

    def __init__(self, logger: logging.Logger = None):
        """Initialize document converter with logger."""
        self.logger = logger or logging.getLogger('gdoc_markdown_exporter.converters.document_converter')

    def convert(self, raw_document: Dict[str, Any]) -> Document:
        """
        Convert a ``documents.get`` response into a Document.

        Args:
            raw_document: Document structure with title, body.content and inlineObjects

        Returns:
            Document with elements in block-then-run order
        """
        document = Document(title=raw_document.get('title', ''), source=raw_document)
        self.logger.info(f"Converting document '{document.title}'")

        body = raw_document.get('body') or {}
        for block in body.get('content') or []:
            document.conversion_metadata['blocks_total'] += 1
            self._convert_block(document, block)

        stats = document.conversion_metadata
        self.logger.info(
            f"Document '{document.title}' converted: {len(document.elements)} elements, "
            f"{stats['images_found']} images, {stats['blocks_skipped']} blocks skipped, "
            f"{stats['runs_skipped']} runs skipped"
        )
        return document

    def _convert_block(self, document: Document, block: Optional[Dict[str, Any]]) -> None:
        """Append the elements of one structural block."""
        paragraph = block.get('paragraph') if block else None
        if paragraph is None:
            document.conversion_metadata['blocks_skipped'] += 1
            self.logger.debug(f"Skipping non-paragraph block: {self._describe(block)}")
            return

        style = paragraph.get('paragraphStyle') or {}
        is_title = style.get('namedStyleType') == TITLE_STYLE

        for run in paragraph.get('elements') or []:
            run = run or {}
            if run.get('textRun') is not None:
                content = run['textRun'].get('content') or ''
                self._add(document, HeadingElement(body=content) if is_title else TextElement(body=content))
                continue

            if run.get('inlineObjectElement') is not None:
                self._convert_inline_object(document, run['inlineObjectElement'])
                continue

            document.conversion_metadata['runs_skipped'] += 1
            self.logger.debug(f"Ignoring unsupported run: {self._describe(run)}")

    def _convert_inline_object(self, document: Document, reference: Dict[str, Any]) -> None:
        """Resolve an inline object reference to an image element, if possible."""
        inline_object_id = reference.get('inlineObjectId')
        inline_objects = (document.source or {}).get('inlineObjects') or {}
        inline_object = inline_objects.get(inline_object_id)

        image = self._resolve_image(inline_object)
        if image is None:
            document.conversion_metadata['runs_skipped'] += 1
            self.logger.debug(f"Inline object '{inline_object_id}' has no image properties, skipping")
            return

        if image.object_id in document.images:
            warning = f"Duplicate image object id '{image.object_id}'"
            document.conversion_metadata['conversion_warnings'].append(warning)
            self.logger.warning(warning)
        else:
            document.images[image.object_id] = image

        document.conversion_metadata['images_found'] += 1
        self._add(document, ImageElement(image=image))

    @staticmethod
    def _resolve_image(inline_object: Optional[Dict[str, Any]]) -> Optional[DocumentImage]:
        """Build image metadata from an inline object entry, or None."""
        if not inline_object:
            return None

        properties = inline_object.get('inlineObjectProperties')
        if not properties:
            return None

        embedded = properties.get('embeddedObject')
        if not embedded:
            return None

        image_properties = embedded.get('imageProperties')
        if image_properties is None:
            return None

        # The entry's own objectId names the file, not the reference id
        return DocumentImage(
            object_id=inline_object.get('objectId') or '',
            content_uri=image_properties.get('contentUri') or '',
            description=embedded.get('description') or ''
        )

    @staticmethod
    def _add(document: Document, element: Element) -> None:
        document.elements.append(element)

    @staticmethod
    def _describe(item: Optional[Dict[str, Any]]) -> str:
        if not item:
            return 'empty'
        keys = [key for key in item if key not in ('startIndex', 'endIndex')]
        return ', '.join(keys) or 'empty'


def render_markdown(elements: List[Element]) -> str:
    """Concatenate the markdown fragments of elements in order."""
    return ''.join(element.to_markdown() for element in elements)


__all__ = ['DocumentConverter', 'render_markdown', 'TITLE_STYLE']
