# api/schema.py
# 使用 pydantic 定义 HTTP 接口的请求 / 响应结构
from typing import Any, Dict, List, Literal

from pydantic import BaseModel


class NormalizeRequest(BaseModel):
    """待规范化的 HTML 片段"""

    html: str
    # 导出 Word 时使用的配置文件，必须位于 profiles/ 目录内
    profile_path: str = "profiles/default.yaml"


class ListItemOut(BaseModel):
    """模型中的单个块（段落或列表项）快照"""

    id: int
    name: Literal["paragraph", "listItem"]
    text: str = ""
    attributes: Dict[str, Any] = {}


class NormalizeResponse(BaseModel):
    status: Literal["ok"] = "ok"
    # 重新渲染后的 HTML（容器按 listType / listIndent / listStyle 分组）
    html: str
    items: List[ListItemOut] = []
