# liststyles/view.py
"""
Rendered view tree.

The view mirrors the model with real containers: consecutive list items are
wrapped in ``ul``/``ol`` elements, nested lists live inside the ``li`` of the
item they belong to. Only the downcast converters mutate it, through
:class:`ViewWriter`.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from bs4 import BeautifulSoup

CONTAINER_NAMES = ("ul", "ol")
LIST_STYLE_TYPE = "list-style-type"


class ViewElement:
    def __init__(self, name: str, attributes: Optional[Dict[str, str]] = None, text: str = "") -> None:
        self.name = name
        self.attributes: Dict[str, str] = dict(attributes or {})
        self.text = text
        self.children: List["ViewElement"] = []
        self.parent: Optional["ViewElement"] = None
        self._styles: Dict[str, str] = {}

    def __repr__(self) -> str:
        return f"<ViewElement {self.name} styles={self._styles!r} children={len(self.children)}>"

    @property
    def is_container(self) -> bool:
        return self.name in CONTAINER_NAMES

    @property
    def index(self) -> int:
        if self.parent is None:
            raise ValueError(f"{self.name!r} is not attached to the view")
        return self.parent.children.index(self)

    def get_style(self, name: str) -> Optional[str]:
        return self._styles.get(name)

    def has_style(self, name: str) -> bool:
        return name in self._styles

    @property
    def styles(self) -> Dict[str, str]:
        return dict(self._styles)

    def iter_descendants(self) -> Iterator["ViewElement"]:
        for child in self.children:
            yield child
            yield from child.iter_descendants()


@dataclass
class Position:
    parent: ViewElement
    offset: int


class ViewWriter:
    def create_element(self, name: str, attributes: Optional[Dict[str, str]] = None, text: str = "") -> ViewElement:
        return ViewElement(name, attributes, text)

    def insert(self, position: Position, element: ViewElement) -> ViewElement:
        if element.parent is not None:
            self.remove(element)
        element.parent = position.parent
        position.parent.children.insert(position.offset, element)
        return element

    def append(self, parent: ViewElement, element: ViewElement) -> ViewElement:
        return self.insert(Position(parent, len(parent.children)), element)

    def remove(self, element: ViewElement) -> None:
        if element.parent is not None:
            element.parent.children.remove(element)
            element.parent = None

    def position_before(self, element: ViewElement) -> Position:
        return Position(element.parent, element.index)

    def position_after(self, element: ViewElement) -> Position:
        return Position(element.parent, element.index + 1)

    def break_container(self, position: Position) -> Position:
        """Split ``position.parent`` at ``position.offset``.

        Breaking at either edge of the container creates nothing and returns
        the position before/after the container.
        """
        container = position.parent
        if container.parent is None:
            raise ValueError("cannot break the view root")
        if position.offset <= 0:
            return self.position_before(container)
        if position.offset >= len(container.children):
            return self.position_after(container)

        clone = ViewElement(container.name, container.attributes)
        clone._styles = dict(container._styles)
        moved = container.children[position.offset:]
        del container.children[position.offset:]
        for child in moved:
            child.parent = clone
            clone.children.append(child)
        self.insert(self.position_after(container), clone)
        return self.position_after(container)

    def merge_containers(self, first: ViewElement, second: ViewElement) -> Position:
        """Move the children of ``second`` to the end of ``first`` and drop ``second``."""
        if first.parent is None or first.parent is not second.parent or second.index != first.index + 1:
            raise ValueError("only adjacent containers can be merged")
        if first.name != second.name:
            raise ValueError(f"cannot merge {first.name!r} with {second.name!r}")
        boundary = len(first.children)
        for child in list(second.children):
            child.parent = first
            first.children.append(child)
        second.children = []
        self.remove(second)
        return Position(first, boundary)

    def set_style(self, name: str, value: str, element: ViewElement) -> None:
        element._styles[name] = value

    def remove_style(self, name: str, element: ViewElement) -> None:
        element._styles.pop(name, None)


class Mapper:
    """Binds model element ids to the view elements rendering them."""

    def __init__(self) -> None:
        self._to_view: Dict[int, ViewElement] = {}
        self._to_model: Dict[int, int] = {}

    def bind(self, model_id: int, view_element: ViewElement) -> None:
        self._to_view[model_id] = view_element
        self._to_model[id(view_element)] = model_id

    def to_view(self, model_id: int) -> Optional[ViewElement]:
        return self._to_view.get(model_id)

    def to_model(self, view_element: ViewElement) -> Optional[int]:
        return self._to_model.get(id(view_element))

    def clear(self) -> None:
        self._to_view.clear()
        self._to_model.clear()


class View:
    def __init__(self) -> None:
        self.root = ViewElement("$root")
        self.mapper = Mapper()
        self.writer = ViewWriter()

    def reset(self) -> None:
        self.root = ViewElement("$root")
        self.mapper.clear()

    def containers(self) -> List[ViewElement]:
        """All ``ul``/``ol`` elements in document order."""
        return [el for el in self.root.iter_descendants() if el.is_container]

    def to_html(self) -> str:
        return to_html(self.root)


def _serialize_styles(styles: Dict[str, str]) -> str:
    return ";".join(f"{key}:{value}" for key, value in styles.items())


def _to_tag(soup: BeautifulSoup, element: ViewElement):
    tag = soup.new_tag(element.name)
    for key, value in element.attributes.items():
        tag[key] = value
    if element.styles:
        tag["style"] = _serialize_styles(element.styles)
    if element.text:
        tag.append(element.text)
    for child in element.children:
        tag.append(_to_tag(soup, child))
    return tag


def to_html(root: ViewElement) -> str:
    soup = BeautifulSoup("", "html.parser")
    for child in root.children:
        soup.append(_to_tag(soup, child))
    return str(soup)
