"""统一业务异常模型。

Provider 与传输层抛出的错误都继承自 BusinessError，
由编排层在边界处统一捕获，再交给 classifier 映射为 ErrorKind。

code 是分类的唯一依据，因此每个抛出点都必须显式给出 code。
"""


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "RATE_LIMIT"）。
        message: 用户可读错误信息。
        http_status: 对应的 HTTP 状态码，默认 400。
        extra: 其他补充字段（例如 provider、model 等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class NetworkError(BusinessError):
    """网络层错误，例如 DNS 失败、连接被拒绝等。"""


class ConnectionTimeoutError(NetworkError):
    """连接或读取超时。"""


class ApiError(BusinessError):
    """API 返回非 2xx 响应时抛出，未归入下列子类的状态码使用本类。"""


class BadRequestError(ApiError):
    """400：请求内容无效。"""


class AuthenticationError(ApiError):
    """401：认证失败，或本地未配置 API 密钥。"""


class PermissionDeniedError(ApiError):
    """403：没有访问权限。"""


class NotFoundError(ApiError):
    """404：模型或资源不存在。"""


class ConflictError(ApiError):
    """409：请求冲突。"""


class UnprocessableEntityError(ApiError):
    """422：请求格式正确但无法处理。"""


class RateLimitError(ApiError):
    """429：触发限流。"""


class InternalServerError(ApiError):
    """5xx：服务端内部错误。"""


class UserAbortError(BusinessError):
    """请求被调用方主动中止。"""


class ValidationError(BusinessError):
    """参数或配置校验失败（在发出请求之前）。"""
