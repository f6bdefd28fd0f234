# liststyles/__init__.py
# 对外公开编辑器与列表样式相关的核心类型，方便 from liststyles import ...
from liststyles.editor import Editor
from liststyles.engine import Model, PostFixerLoopError
from liststyles.model import DEFAULT_LIST_STYLE, ListType, same_structural_list
from liststyles.writer import SchemaError

__all__ = [
    "Editor",
    "Model",
    "PostFixerLoopError",
    "DEFAULT_LIST_STYLE",
    "ListType",
    "same_structural_list",
    "SchemaError",
]
