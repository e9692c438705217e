"""错误类型."""


class ReadShelfError(Exception):
    """ReadShelf 基础错误."""


class NetworkError(ReadShelfError):
    """网络错误：非 2xx 响应或传输层失败."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class FetchTimeoutError(ReadShelfError, TimeoutError):
    """请求超过截止时间."""

    def __init__(self, timeout: float) -> None:
        super().__init__(f"请求超过 {timeout:g}s 超时")
        self.timeout = timeout


class ExtractionFailure(ReadShelfError):
    """正文提取失败或质量下降."""


class AssetFetchFailure(ReadShelfError):
    """单张图片抓取失败（不影响批次）."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class ImportValidationError(ReadShelfError):
    """导入文件无效，在开始抓取前抛出."""


class NotFoundError(ReadShelfError):
    """记录不存在."""


class ImportJobStateError(ReadShelfError):
    """导入任务状态迁移不合法."""
