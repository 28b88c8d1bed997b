"""领域层模型与协议。

包含：
- models: 统一的 ChatMessage / ChatRequest / 流式增量模型。
- exceptions: 与 Provider 通信时抛出的业务异常类型定义。
- error_kinds: 面向用户的错误分类及本地化提示文案。
- classifier: 把任意异常映射为 ErrorKind 的分类函数。
"""
