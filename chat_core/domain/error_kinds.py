"""面向用户的错误分类。

ErrorKind 是封闭枚举，每个取值对应一条固定的本地化提示文案。
失败时调用方拿到的唯一产物就是 ErrorKind（以及它的提示文案）。
"""

from enum import Enum
from typing import Dict, Optional


class ErrorKind(str, Enum):
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    BAD_REQUEST = "bad_request"
    USER_ABORT = "user_abort"
    CONNECTION_FAILED = "connection_failed"
    UNPROCESSABLE = "unprocessable"
    AUTHENTICATION = "authentication"
    SERVER_FAULT = "server_fault"
    PERMISSION_DENIED = "permission_denied"
    CONNECTION_TIMEOUT = "connection_timeout"
    FILTERED = "filtered"
    UNKNOWN = "unknown"

    def display(self, locale: Optional[str] = None) -> str:
        return error_message(self, locale)


DEFAULT_LOCALE = "ja"

ERROR_MESSAGES: Dict[str, Dict[ErrorKind, str]] = {
    "ja": {
        ErrorKind.CONFLICT: "エラー: リクエストが競合しています。別のリクエストが同時に処理中です。",
        ErrorKind.NOT_FOUND: "エラー: リクエストされたリソースが見つかりませんでした。",
        ErrorKind.RATE_LIMITED: "エラー: レート制限を超えました。しばらくしてからもう一度お試しください。",
        ErrorKind.BAD_REQUEST: "エラー: リクエストが無効です。リクエスト内容を確認してください。",
        ErrorKind.USER_ABORT: "エラー: ユーザーによってリクエストが中止されました。",
        ErrorKind.CONNECTION_FAILED: "エラー: APIへの接続に失敗しました。ネットワーク設定を確認してください。",
        ErrorKind.UNPROCESSABLE: "エラー: リクエストの内容を処理できません。入力データを確認してください。",
        ErrorKind.AUTHENTICATION: "エラー: 認証に失敗しました。APIキーを確認してください。",
        ErrorKind.SERVER_FAULT: "エラー: サーバー内部でエラーが発生しました。しばらくしてからもう一度お試しください。",
        ErrorKind.PERMISSION_DENIED: "エラー: アクセス権限がありません。必要な権限を確認してください。",
        ErrorKind.CONNECTION_TIMEOUT: "エラー: API接続がタイムアウトしました。ネットワークを確認して再試行してください。",
        ErrorKind.FILTERED: "エラー: 応答がフィルタリングされました。",
        ErrorKind.UNKNOWN: "不明なエラーが発生しました。",
    },
    "zh": {
        ErrorKind.CONFLICT: "错误：请求冲突，另一个请求正在处理中。",
        ErrorKind.NOT_FOUND: "错误：未找到请求的资源。",
        ErrorKind.RATE_LIMITED: "错误：超出速率限制，请稍后重试。",
        ErrorKind.BAD_REQUEST: "错误：请求无效，请检查请求内容。",
        ErrorKind.USER_ABORT: "错误：请求已被用户中止。",
        ErrorKind.CONNECTION_FAILED: "错误：连接 API 失败，请检查网络设置。",
        ErrorKind.UNPROCESSABLE: "错误：无法处理请求内容，请检查输入数据。",
        ErrorKind.AUTHENTICATION: "错误：认证失败，请检查 API 密钥。",
        ErrorKind.SERVER_FAULT: "错误：服务器内部错误，请稍后重试。",
        ErrorKind.PERMISSION_DENIED: "错误：没有访问权限，请检查所需权限。",
        ErrorKind.CONNECTION_TIMEOUT: "错误：API 连接超时，请检查网络后重试。",
        ErrorKind.FILTERED: "错误：回答被内容过滤拦截。",
        ErrorKind.UNKNOWN: "发生未知错误。",
    },
    "en": {
        ErrorKind.CONFLICT: "Error: the request conflicts with another request in progress.",
        ErrorKind.NOT_FOUND: "Error: the requested resource was not found.",
        ErrorKind.RATE_LIMITED: "Error: rate limit exceeded. Please try again later.",
        ErrorKind.BAD_REQUEST: "Error: the request is invalid. Please check its contents.",
        ErrorKind.USER_ABORT: "Error: the request was aborted by the user.",
        ErrorKind.CONNECTION_FAILED: "Error: could not connect to the API. Please check your network settings.",
        ErrorKind.UNPROCESSABLE: "Error: the request could not be processed. Please check the input data.",
        ErrorKind.AUTHENTICATION: "Error: authentication failed. Please check your API key.",
        ErrorKind.SERVER_FAULT: "Error: the server encountered an internal error. Please try again later.",
        ErrorKind.PERMISSION_DENIED: "Error: permission denied. Please check the required permissions.",
        ErrorKind.CONNECTION_TIMEOUT: "Error: the API connection timed out. Please check your network and retry.",
        ErrorKind.FILTERED: "Error: the response was filtered.",
        ErrorKind.UNKNOWN: "An unknown error occurred.",
    },
}

SUPPORTED_LOCALES = tuple(ERROR_MESSAGES)


def error_message(kind: ErrorKind, locale: Optional[str] = None) -> str:
    """返回 ErrorKind 对应的提示文案，未知 locale 回落到默认语言。"""

    table = ERROR_MESSAGES.get((locale or DEFAULT_LOCALE).lower(), ERROR_MESSAGES[DEFAULT_LOCALE])
    return table[kind]
