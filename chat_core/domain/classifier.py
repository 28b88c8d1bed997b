"""错误分类器。

把与 Provider 通信时出现的任意异常映射为唯一的 ErrorKind。
这是一个全函数：无法识别的异常一律归为 ErrorKind.UNKNOWN。

分类只看异常的 code（见 domain.exceptions），各 code 互斥，
因此这里是一张扁平的查找表，不依赖 isinstance 的先后顺序。
"""

import asyncio
from typing import Dict

from chat_core.domain.error_kinds import ErrorKind
from chat_core.domain.exceptions import BusinessError


KIND_BY_CODE: Dict[str, ErrorKind] = {
    "CONFLICT": ErrorKind.CONFLICT,
    "NOT_FOUND": ErrorKind.NOT_FOUND,
    "RATE_LIMIT": ErrorKind.RATE_LIMITED,
    "BAD_REQUEST": ErrorKind.BAD_REQUEST,
    "UNSUPPORTED_MODEL": ErrorKind.BAD_REQUEST,
    "INVALID_MESSAGE": ErrorKind.BAD_REQUEST,
    "EMPTY_CONVERSATION": ErrorKind.BAD_REQUEST,
    "USER_ABORT": ErrorKind.USER_ABORT,
    "CONNECTION_FAILED": ErrorKind.CONNECTION_FAILED,
    "UNPROCESSABLE": ErrorKind.UNPROCESSABLE,
    "AUTHENTICATION": ErrorKind.AUTHENTICATION,
    "SERVER_ERROR": ErrorKind.SERVER_FAULT,
    "PERMISSION_DENIED": ErrorKind.PERMISSION_DENIED,
    "CONNECTION_TIMEOUT": ErrorKind.CONNECTION_TIMEOUT,
}


def classify(error: BaseException) -> ErrorKind:
    """把异常映射为 ErrorKind，纯函数、无副作用。"""

    if isinstance(error, asyncio.CancelledError):
        # 任务被取消即视为调用方中止
        return ErrorKind.USER_ABORT
    if isinstance(error, BusinessError):
        return KIND_BY_CODE.get(error.code, ErrorKind.UNKNOWN)
    return ErrorKind.UNKNOWN
