# src/purgecss/mapping/hierarchy.py
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .builder import MapStructures
from .core import Handle

# A materialised view: handle -> element data, with a nested 'children' view where present.
ElementView = Dict[Handle, Dict[str, Any]]


class HierarchyEngine:
    """
    Answers hierarchy questions (descendants, siblings) against the structures
    produced by the HtmlMapBuilder.

    Results are materialised as ordered dictionaries keyed by handle. Every
    value is the element's record data; elements that have children also carry
    a 'children' key holding the same kind of view for their subtree.
    """

    def __init__(self, structures: MapStructures):
        self._elements = structures.elements
        self._roots = structures.roots
        self._children = structures.children
        self._parents = structures.parents

    def parent(self, handle: Handle) -> Optional[Handle]:
        """Returns the parent handle, or None for top-level and unknown handles."""
        return self._parents.get(handle)

    def children(self, handle: Handle) -> Optional[Tuple[Handle, ...]]:
        """Returns the direct child handles in document order, or None for an unknown handle."""
        if handle not in self._elements:
            return None
        return tuple(self._children.get(handle, ()))

    def descendants(self, handle: Handle) -> Optional[ElementView]:
        """
        Returns every element beneath `handle`, nested the way they are nested in the document.

        Returns None if the handle is unknown to the element table.
        """
        if handle not in self._elements:
            return None

        if handle not in self._children:
            return {}

        return self.materialize(self._children[handle])

    def siblings(self, handle: Handle) -> Optional[ElementView]:
        """
        Returns the other elements sharing the parent of `handle` (or the other
        top-level elements when `handle` has no parent), each with its subtree.

        Returns None if the handle is unknown to the element table.
        """
        if handle not in self._elements:
            return None

        if handle not in self._parents:
            return {}

        parent = self._parents[handle]
        level = self._roots if parent is None else self._children[parent]

        return self.materialize(h for h in level if h != handle)

    def materialize(self, handles: Iterable[Handle]) -> ElementView:
        """Converts a sequence of handles into an element view, including their subtrees."""
        view: ElementView = {}
        # Each entry pairs a handle with the view it belongs in; pre-order keeps document order.
        stack: List[Tuple[Handle, ElementView]] = [(h, view) for h in reversed(list(handles))]

        while stack:
            handle, target = stack.pop()
            data = self._elements[handle].to_view()
            target[handle] = data

            kids = self._children.get(handle)
            if kids:
                data["children"] = {}
                stack.extend((kid, data["children"]) for kid in reversed(kids))

        return view
