# liststyles/editor.py
import logging
from typing import Any, Dict, List, Optional

from .commands import Command, CommandError
from .conversion import DowncastDispatcher, UpcastDispatcher
from .engine import Model
from .lists import setup_lists
from .model import ChangeRecord, Element
from .styles import LIST_STYLE, setup_list_styles
from .view import View

logger = logging.getLogger(__name__)


class Editor:
    """Model, view, converters and commands wired together.

    The view is kept in sync after every settled model change: changes that
    only touch ``listStyle`` are dispatched to the attribute converters on the
    existing view, anything structural rebuilds the view. A change that fails
    halfway also rebuilds it, so the view shows the writes that did happen.
    """

    def __init__(self, max_postfix_passes: int = 10) -> None:
        self.model = Model(max_postfix_passes=max_postfix_passes)
        self.view = View()
        self.upcast = UpcastDispatcher(self.model)
        self.downcast = DowncastDispatcher(self.model, self.view)
        self.commands: Dict[str, Command] = {}

        setup_lists(self)
        setup_list_styles(self)

        self.model.on_change(self._on_model_change)
        self.model.on_error(self._on_model_error)

    def set_data(self, html: str) -> List[Element]:
        """Replace the document with the content of ``html``."""
        with self.model.change() as writer:
            for node in list(self.model.document):
                writer.remove(node)
            created = self.upcast.convert(html, writer)
        logger.debug("set_data: %d element(s) created", len(created))
        # An empty document produces no change; make sure the view matches it.
        if not created:
            self.downcast.render_document()
        return created

    def get_data(self) -> str:
        return self.view.to_html()

    def execute(self, command_name: str, *args: Any, **kwargs: Any) -> List[Element]:
        command = self.commands.get(command_name)
        if command is None:
            raise CommandError(f"unknown command {command_name!r}, expected one of {sorted(self.commands)}")
        return command.execute(*args, **kwargs)

    def items(self) -> List[Dict[str, Any]]:
        return [node.to_dict() for node in self.model.document]

    def find(self, text: str) -> Optional[Element]:
        """First element whose text equals ``text`` (handy in scripts and tests)."""
        for node in self.model.document:
            if node.text == text:
                return node
        return None

    def _on_model_change(self, changes: List[ChangeRecord]) -> None:
        style_only = all(c.type == "attribute" and c.attribute_key == LIST_STYLE for c in changes)
        if style_only and self.view.root.children:
            self.downcast.convert_attribute_changes(changes)
        else:
            self.downcast.render_document()

    def _on_model_error(self, exc: BaseException) -> None:
        logger.warning("model change failed (%s: %s); re-rendering the view", type(exc).__name__, exc)
        self.downcast.render_document()
