"""领域异常 (Domain exceptions raised by the orchestrator and mapped to HTTP by the routes)"""


class AnalystError(Exception):
    """所有领域异常的基类"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InputError(AnalystError):
    """缺少问题、缺少文件或文件无法解析"""

    status_code = 400


class NotFoundError(AnalystError):
    """会话不存在或已过期，调用方需要重新上传文件"""

    status_code = 404


class CollaboratorFailure(AnalystError):
    """LLM调用或文档渲染失败"""

    status_code = 500

    def __init__(self, message: str, cause: Exception = None):
        super().__init__(message)
        self.cause = cause
