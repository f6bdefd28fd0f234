# liststyles/schema.py
from typing import Callable, Dict, List, Optional, Set

from .model import Element

# A check returns False to disallow, None to defer to the next check / the registry.
AttributeCheck = Callable[[Element, str], Optional[bool]]


class Schema:
    """Which attributes each element name may carry, plus dynamic checks."""

    def __init__(self) -> None:
        self._allowed: Dict[str, Set[str]] = {}
        self._checks: List[AttributeCheck] = []

    def register(self, name: str, allow_attributes=()) -> None:
        if name in self._allowed:
            raise ValueError(f"schema item {name!r} is already registered")
        self._allowed[name] = set(allow_attributes)

    def extend(self, name: str, allow_attributes=()) -> None:
        if name not in self._allowed:
            raise ValueError(f"cannot extend unregistered schema item {name!r}")
        self._allowed[name].update(allow_attributes)

    def is_registered(self, name: str) -> bool:
        return name in self._allowed

    def add_attribute_check(self, check: AttributeCheck) -> None:
        self._checks.append(check)

    def check_attribute(self, node: Element, key: str) -> bool:
        for check in self._checks:
            if check(node, key) is False:
                return False
        return key in self._allowed.get(node.name, ())

    def disallowed_attributes(self, node: Element) -> List[str]:
        return [key for key in node.attributes if not self.check_attribute(node, key)]
