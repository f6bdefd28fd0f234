# config.py
# 从环境变量读取列表样式引擎与服务端配置，所有变量均有合理默认值
import os
from dotenv import load_dotenv

# 尝试从运行目录下的 key.env 文件中加载环境变量
load_dotenv(dotenv_path="key.env")

# post-fixer 最多重跑的轮数（强制正整数，防止修复器互相触发导致死循环）
LISTSTYLE_MAX_POSTFIX_PASSES: int = max(1, int(os.getenv("LISTSTYLE_MAX_POSTFIX_PASSES", "10")))

# 日志级别：DEBUG / INFO / WARNING / ERROR
LISTSTYLE_LOG_LEVEL: str = os.getenv("LISTSTYLE_LOG_LEVEL", "INFO").strip().upper() or "INFO"

# 默认的导出配置文件（YAML）
LISTSTYLE_PROFILE: str = os.getenv("LISTSTYLE_PROFILE", "profiles/default.yaml")

# API 服务端鉴权 Key（为空则不启用认证，适合本地 Demo；生产环境请务必设置）
SERVER_API_KEY: str = os.getenv("SERVER_API_KEY", "")

# 生产环境硬性鉴权开关：REQUIRE_AUTH=true 时，若 SERVER_API_KEY 为空则启动时抛出异常
REQUIRE_AUTH: bool = os.getenv("REQUIRE_AUTH", "false").strip().lower() == "true"
