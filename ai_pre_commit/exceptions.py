"""评审流程中的异常定义"""


class ReviewError(Exception):
    """评审流程异常基类"""


class ConfigError(ReviewError):
    """配置文件或环境变量无效"""


class GitCommandError(ReviewError):
    """git 命令以非零状态退出"""

    def __init__(self, args: list[str], returncode: int, stderr: str = ""):
        self.command = ["git"] + list(args)
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip() or f"退出码 {returncode}"
        super().__init__(f"Git 命令执行失败 ({' '.join(self.command)}): {detail}")


class ProviderRequestError(ReviewError):
    """无法连接 AI 提供商（网络或传输层错误）"""


class ProviderResponseError(ReviewError):
    """AI 提供商返回了失败状态或无法识别的响应"""

    def __init__(self, message: str, status_code: int | None = None, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(message)
