"""Converters package for turning Google Docs structures into markdown elements."""

import logging

from .document_converter import DocumentConverter, render_markdown

module_logger = logging.getLogger('gdoc_markdown_exporter.converters')


def convert_document(raw_document, logger=None):
    """
    Convenience function to convert a fetched document structure.

    Args:
        raw_document: ``documents.get`` response as a dictionary
        logger: Optional logger instance (uses module logger if not provided)

    Returns:
        Document with its ordered elements and image index

    Example:
        >>> from converters import convert_document, render_markdown
        >>> doc = convert_document({'title': 'Demo', 'body': {'content': []}})
        >>> render_markdown(doc.elements)
        ''
    """
    converter = DocumentConverter(logger=logger or module_logger)
    return converter.convert(raw_document)


__all__ = [
    'convert_document',
    'render_markdown',
    'DocumentConverter'
]
