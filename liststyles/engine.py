# liststyles/engine.py
import logging
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional

from .model import ChangeRecord, Document
from .schema import Schema
from .writer import Writer

logger = logging.getLogger(__name__)

PostFixer = Callable[[Writer], bool]
ChangeListener = Callable[[List[ChangeRecord]], None]
ErrorListener = Callable[[BaseException], None]


class PostFixerLoopError(RuntimeError):
    """Post-fixers kept reporting fixes past the configured pass limit."""


class Model:
    """Owns the document and the transaction scope all mutations go through.

    Leaving the outermost ``change()`` block settles the document:

    1. every registered post-fixer runs; while any of them reports a fix the
       whole set runs again, up to ``max_postfix_passes`` passes;
    2. change listeners receive the buffered change log;
    3. the change log is cleared.

    When the block raises, the change log is dropped, error listeners are told
    about the exception and it propagates; writes made so far stay in place.
    """

    def __init__(self, schema: Optional[Schema] = None, max_postfix_passes: int = 10) -> None:
        if max_postfix_passes < 1:
            raise ValueError("max_postfix_passes must be >= 1")
        self.schema = schema or Schema()
        self.document = Document()
        self.max_postfix_passes = max_postfix_passes
        self._post_fixers: List[PostFixer] = [self._remove_disallowed_attributes]
        self._listeners: List[ChangeListener] = []
        self._error_listeners: List[ErrorListener] = []
        self._writer: Optional[Writer] = None

    def register_post_fixer(self, fixer: PostFixer) -> None:
        self._post_fixers.append(fixer)

    def on_change(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def on_error(self, listener: ErrorListener) -> None:
        self._error_listeners.append(listener)

    @property
    def in_change(self) -> bool:
        return self._writer is not None

    @contextmanager
    def change(self) -> Iterator[Writer]:
        if self._writer is not None:
            # Nested scope: joins the enclosing transaction.
            yield self._writer
            return

        self._writer = Writer(self.document, self.schema)
        try:
            yield self._writer
            self._run_post_fixers(self._writer)
        except BaseException as exc:
            # No local rollback; the caller owns recovery.
            self.document.differ.reset()
            for listener in self._error_listeners:
                listener(exc)
            raise
        finally:
            self._writer = None

        changes = self.document.differ.get_changes()
        self.document.differ.reset()
        if changes:
            for listener in self._listeners:
                listener(changes)

    def _run_post_fixers(self, writer: Writer) -> int:
        if self.document.differ.is_empty:
            return 0
        passes = 0
        while True:
            passes += 1
            if passes > self.max_postfix_passes:
                raise PostFixerLoopError(
                    f"post-fixers did not settle after {self.max_postfix_passes} passes"
                )
            was_fixed = False
            for fixer in self._post_fixers:
                if fixer(writer):
                    logger.debug("post-fixer %s applied a fix (pass %d)", getattr(fixer, "__name__", fixer), passes)
                    was_fixed = True
            if not was_fixed:
                return passes

    def _remove_disallowed_attributes(self, writer: Writer) -> bool:
        touched = {}
        for change in self.document.differ.get_changes():
            if change.type in ("insert", "attribute") and change.node_id in self.document:
                touched[change.node_id] = True

        was_fixed = False
        for node_id in touched:
            node = self.document.get(node_id)
            for key in self.schema.disallowed_attributes(node):
                writer.remove_attribute(key, node)
                was_fixed = True
        return was_fixed
