# src/purgecss/mapping/html_map.py
from typing import Any, Dict, List, Optional, Tuple

from .builder import HtmlMapBuilder, MapStructures
from .core import ElementRecord, Handle, normalize_tag
from .hierarchy import ElementView, HierarchyEngine


class HtmlMap:
    """
    Maps out an HTML document with only the information required to decide
    whether CSS selectors could match: tags and their hierarchy, ids, classes
    and the remaining attributes.

    <head> elements are ignored as they are not styleable.

    Every element is addressed by an internal handle. Note that the handle is
    *not* the HTML id attribute. The map is built once in the constructor and
    is read-only afterwards.
    """

    def __init__(self, html: str, builder: Optional[HtmlMapBuilder] = None):
        """
        Parses the given HTML immediately.

        Raises:
            MalformedDocument: If the HTML cannot be parsed.
            EmptyDocument: If the HTML contains no elements.
        """
        structures = (builder or HtmlMapBuilder()).build(html)

        # Only assigned once the build succeeded; a failed parse leaves no partial map.
        self._structures: MapStructures = structures
        self._engine = HierarchyEngine(structures)

    # --- Element table ---

    def element(self, handle: Handle) -> Optional[ElementRecord]:
        """Returns the record for a handle, or None if no element has that handle."""
        return self._structures.elements.get(handle)

    def get_element(self, handle: Handle) -> Optional[ElementRecord]:
        return self.element(handle)

    def get_elements(self) -> Dict[Handle, ElementRecord]:
        """Returns all mapped elements, keyed by handle, in document order."""
        return dict(self._structures.elements)

    def __len__(self) -> int:
        return len(self._structures.elements)

    def __contains__(self, handle: object) -> bool:
        return handle in self._structures.elements

    # --- Indices ---

    def uses_tag(self, tag: str) -> bool:
        """Determines if the given tag is used at all in the HTML."""
        return normalize_tag(tag) in self._structures.tags

    def uses_id(self, element_id: str) -> bool:
        """Determines if the given id attribute value is used at all in the HTML."""
        return element_id in self._structures.ids

    def uses_class(self, cls: str) -> bool:
        """Determines if the given class is used at all in the HTML."""
        return cls in self._structures.classes

    def tag_handles(self, tag: str) -> Tuple[Handle, ...]:
        return tuple(self._structures.tags.get(normalize_tag(tag), ()))

    def id_handles(self, element_id: str) -> Tuple[Handle, ...]:
        return tuple(self._structures.ids.get(element_id, ()))

    def class_handles(self, cls: str) -> Tuple[Handle, ...]:
        return tuple(self._structures.classes.get(cls, ()))

    def get_tags(self) -> Dict[str, List[Handle]]:
        """Tag name -> handles of every element using that tag."""
        return {tag: list(handles) for tag, handles in self._structures.tags.items()}

    def get_ids(self) -> Dict[str, List[Handle]]:
        """id attribute value -> handles of every element declaring it."""
        return {key: list(handles) for key, handles in self._structures.ids.items()}

    def get_classes(self) -> Dict[str, List[Handle]]:
        """Class name -> handles of every element using that class."""
        return {cls: list(handles) for cls, handles in self._structures.classes.items()}

    # --- Hierarchy ---

    def get_hierarchy(self) -> Dict[Handle, Any]:
        """
        Returns the hierarchy as nested dictionaries of handles.
        Childless elements map to an empty dictionary.
        """
        hierarchy: Dict[Handle, Any] = {}
        stack: List[Tuple[Handle, Dict[Handle, Any]]] = [
            (h, hierarchy) for h in reversed(self._structures.roots)
        ]

        while stack:
            handle, target = stack.pop()
            target[handle] = {}
            stack.extend((kid, target[handle]) for kid in reversed(self._structures.children[handle]))

        return hierarchy

    def get_roots(self) -> Tuple[Handle, ...]:
        """Returns the top-level handles in document order."""
        return tuple(self._structures.roots)

    def parent(self, handle: Handle) -> Optional[Handle]:
        return self._engine.parent(handle)

    def children(self, handle: Handle) -> Optional[Tuple[Handle, ...]]:
        return self._engine.children(handle)

    def descendants(self, handle: Handle) -> Optional[ElementView]:
        """
        Gets the descendants of a given element as an element view.
        Returns None if the handle is unknown.
        """
        return self._engine.descendants(handle)

    def siblings(self, handle: Handle) -> Optional[ElementView]:
        """
        Gets the siblings of a given element as an element view.
        Returns None if the handle is unknown.
        """
        return self._engine.siblings(handle)
