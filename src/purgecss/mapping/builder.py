# src/purgecss/mapping/builder.py
import logging
from typing import Dict, Iterable, List, Optional, Tuple

from bs4 import BeautifulSoup, FeatureNotFound, Tag
from bs4.builder import ParserRejectedMarkup
from pydantic import BaseModel, Field

from .core import ElementRecord, Handle, RESERVED_ATTRIBUTES, normalize_tag, split_classes
from .errors import EmptyDocument, MalformedDocument, MappingError
from .handles import HandleGenerator
from purgecss.core.managers.config_manager import config_manager

logger = logging.getLogger(__name__)


class MapStructures(BaseModel):
    """
    The raw output of one parse pass: the element table, the three indices
    and the hierarchy (as child lists plus a parent side table).
    """
    elements: Dict[Handle, ElementRecord] = Field(default_factory=dict)
    tags: Dict[str, List[Handle]] = Field(default_factory=dict)
    ids: Dict[str, List[Handle]] = Field(default_factory=dict)
    classes: Dict[str, List[Handle]] = Field(default_factory=dict)

    roots: List[Handle] = Field(default_factory=list)
    children: Dict[Handle, List[Handle]] = Field(default_factory=dict)
    parents: Dict[Handle, Optional[Handle]] = Field(default_factory=dict)


class HtmlMapBuilder:
    """
    Builder responsible for parsing raw HTML into MapStructures.

    Walks the element nodes depth-first in document order, skipping the
    non-styleable <head> section and everything inside it.
    """

    def __init__(
            self,
            parser: Optional[str] = None,
            skipped_tags: Optional[Iterable[str]] = None,
            handle_length: Optional[int] = None,
            max_handle_attempts: Optional[int] = None
    ):
        """
        Any argument left as None is taken from the 'mapping' section of settings.json.
        """
        settings = config_manager.mapping_settings()

        self.parser = parser if parser is not None else settings.parser
        self.skipped_tags = {
            normalize_tag(t) for t in (skipped_tags if skipped_tags is not None else settings.skipped_tags)
        }
        self.handle_length = handle_length if handle_length is not None else settings.handle_length
        self.max_handle_attempts = (
            max_handle_attempts if max_handle_attempts is not None else settings.max_handle_attempts
        )

    def build(self, html: str) -> MapStructures:
        """
        Parses an HTML string and maps every styleable element.

        Args:
            html (str): The raw HTML document.

        Returns:
            MapStructures: The populated element table, indices and hierarchy.

        Raises:
            MalformedDocument: If the input is not a string or cannot be parsed as HTML.
            EmptyDocument: If the document has no top-level elements.
            MappingError: If the configured parser backend is not available.
        """
        top_level = self._top_level_elements(self._parse(html))
        if not top_level:
            logger.warning("Refusing to map a document without top-level elements.")
            raise EmptyDocument("This appears to be an empty document.")

        handles = HandleGenerator(length=self.handle_length, max_attempts=self.max_handle_attempts)
        structures = MapStructures()

        # Children are pushed reversed so they pop in document order (pre-order walk).
        stack: List[Tuple[Tag, Optional[Handle]]] = [(node, None) for node in reversed(top_level)]
        skipped = 0

        while stack:
            node, parent = stack.pop()
            tag_name = normalize_tag(node.name)

            if tag_name in self.skipped_tags:
                skipped += 1
                continue

            handle = handles.issue()
            self._register(structures, handle, tag_name, node)

            # Attach to the hierarchy
            if parent is None:
                structures.roots.append(handle)
            else:
                structures.children[parent].append(handle)
            structures.children[handle] = []
            structures.parents[handle] = parent

            child_elements = [child for child in node.children if isinstance(child, Tag)]
            stack.extend((child, handle) for child in reversed(child_elements))

        logger.debug(
            "Mapped %d elements (%d tags, %d ids, %d classes, %d skipped sections).",
            len(structures.elements), len(structures.tags), len(structures.ids),
            len(structures.classes), skipped
        )
        return structures

    def _parse(self, html: str) -> BeautifulSoup:
        if not isinstance(html, str):
            raise MalformedDocument(f"Expected HTML as a string, got {type(html).__name__}.")

        try:
            # multi_valued_attributes=None keeps 'class' (and 'rel' etc.) as verbatim strings.
            return BeautifulSoup(html, self.parser, multi_valued_attributes=None)
        except ParserRejectedMarkup as e:
            logger.error("Unable to parse the HTML code provided: %s", e)
            raise MalformedDocument("Unable to parse the HTML code provided.") from e
        except FeatureNotFound as e:
            logger.error("HTML parser backend '%s' is not available.", self.parser)
            raise MappingError(f"HTML parser backend '{self.parser}' is not available.") from e

    @staticmethod
    def _top_level_elements(soup: BeautifulSoup) -> List[Tag]:
        """Returns the element nodes directly under the document; doctype, comments and text are dropped."""
        return [node for node in soup.contents if isinstance(node, Tag)]

    @staticmethod
    def _register(structures: MapStructures, handle: Handle, tag_name: str, node: Tag) -> None:
        """Records one element in the element table and the tag, id and class indices."""
        structures.tags.setdefault(tag_name, []).append(handle)

        declared_id = node.get("id")
        if declared_id is not None:
            declared_id = _as_text(declared_id)
            structures.ids.setdefault(declared_id, []).append(handle)

        classes: List[str] = []
        if node.has_attr("class"):
            classes = split_classes(_as_text(node["class"]))
            for cls in classes:
                bucket = structures.classes.setdefault(cls, [])
                if handle not in bucket:
                    bucket.append(handle)

        structures.elements[handle] = ElementRecord(
            tag=tag_name,
            declared_id=declared_id,
            classes=tuple(classes),
            attrs={
                name: _as_text(value)
                for name, value in node.attrs.items()
                if name not in RESERVED_ATTRIBUTES
            },
        )


def _as_text(value) -> str:
    # Some tree builders still hand back lists for multi-valued attributes.
    if isinstance(value, (list, tuple)):
        return " ".join(value)
    return "" if value is None else str(value)
