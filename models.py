"""Data models for the Google Docs to Markdown export pipeline."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Union

logger = logging.getLogger('gdoc_markdown_exporter')

IMAGE_EXTENSION = '.jpg'


class ElementKind(Enum):
    """Kinds of renderable elements produced by the converter."""
    HEADING = "heading"
    TEXT = "text"
    IMAGE = "image"


@dataclass(frozen=True)
class DocumentImage:
    """Metadata of an inline image embedded in a document."""

    object_id: str
    content_uri: str
    description: str = ""

    @property
    def filename(self) -> str:
        """Local filename the image is downloaded to and linked from."""
        return f"{self.object_id}{IMAGE_EXTENSION}"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize image metadata to dictionary."""
        return {
            'object_id': self.object_id,
            'content_uri': self.content_uri,
            'description': self.description
        }


@dataclass(frozen=True)
class HeadingElement:
    """Level-1 heading built from a TITLE paragraph run."""

    body: str
    kind: ClassVar[ElementKind] = ElementKind.HEADING

    def to_markdown(self) -> str:
        return f"# {self.body}\n"


@dataclass(frozen=True)
class TextElement:
    """Plain text line built from a body paragraph run."""

    body: str
    kind: ClassVar[ElementKind] = ElementKind.TEXT

    def to_markdown(self) -> str:
        return f"{self.body}\n"


@dataclass(frozen=True)
class ImageElement:
    """Image reference pointing at the locally downloaded file."""

    image: DocumentImage
    kind: ClassVar[ElementKind] = ElementKind.IMAGE

    def to_markdown(self) -> str:
        # Always links the local .jpg, whatever the remote format is
        return f"![{self.image.description}]({self.image.filename})\n"


Element = Union[HeadingElement, TextElement, ImageElement]


@dataclass
class Document:
    """A converted document: title, ordered elements and image index."""

    title: str
    elements: List[Element] = field(default_factory=list)
    images: Dict[str, DocumentImage] = field(default_factory=dict)
    source: Optional[Dict[str, Any]] = field(default=None, repr=False, compare=False)
    conversion_metadata: Dict[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        """Initialize default conversion metadata if empty."""
        if not self.conversion_metadata:
            self.conversion_metadata = {
                'blocks_total': 0,
                'blocks_skipped': 0,
                'runs_skipped': 0,
                'images_found': 0,
                'conversion_warnings': []
            }

    @property
    def image_elements(self) -> List[ImageElement]:
        """Image elements in document order."""
        return [element for element in self.elements if element.kind is ElementKind.IMAGE]

    @property
    def markdown_filename(self) -> str:
        """Name of the markdown file, taken verbatim from the title."""
        return f"{self.title}.md"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize document to dictionary (source structure excluded)."""
        elements = []
        for element in self.elements:
            if element.kind is ElementKind.IMAGE:
                elements.append({'kind': element.kind.value, 'image': element.image.to_dict()})
            else:
                elements.append({'kind': element.kind.value, 'body': element.body})

        return {
            'title': self.title,
            'elements': elements,
            'images': {key: image.to_dict() for key, image in self.images.items()},
            'conversion_metadata': self.conversion_metadata
        }


__all__ = [
    'IMAGE_EXTENSION',
    'ElementKind',
    'DocumentImage',
    'HeadingElement',
    'TextElement',
    'ImageElement',
    'Element',
    'Document'
]
