# mdx_l10n/exceptions.py
"""
本模块定义了 mdx-l10n 项目中所有自定义的、语义化的异常类型。

上层调用者（流水线、CLI）可以根据不同的错误类型决定是跳过单个文档、
还是中止整个批次。
"""


class L10nError(Exception):
    """
    所有 mdx-l10n 自定义异常的通用基类。
    捕获此异常可以处理所有源自本项目的预期错误。
    """


class ConfigurationError(L10nError):
    """表示在加载、解析或验证配置时发生的错误。"""


class InvalidRangeError(L10nError, ValueError):
    """
    表示一个变更的偏移区间无效：`start < 0`、`end` 超出文本长度或 `start >= end`。
    继承自 ValueError，以便与普通的参数校验错误一起被捕获。
    """

    def __init__(self, start: int, end: int) -> None:
        self.start = start
        self.end = end
        super().__init__(f"无效的偏移区间: ({start}, {end})")


class OverlappingChangesError(L10nError):
    """表示同一文档的两个变更区间发生了重叠，偏移量已无法安全回填。"""

    def __init__(self, first: tuple[int, int], second: tuple[int, int]) -> None:
        self.first = first
        self.second = second
        super().__init__(f"变更区间重叠: {first} 与 {second}")


class MissingPositionError(L10nError):
    """
    表示一个承载正文内容的节点缺少位置信息。
    偏移量无法事后恢复，因此这对当前文档是致命错误。
    """

    def __init__(self, node_type: str) -> None:
        self.node_type = node_type
        super().__init__(f"节点 '{node_type}' 缺少位置信息，无法计算偏移量。")


class DocumentProcessingError(L10nError):
    """包装单个文档处理失败的原因，并附带文件路径，供 CLI 输出一条描述性消息。"""

    def __init__(self, path: str, cause: Exception) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"处理文档 '{path}' 失败: {cause}")


class SmartlingAPIError(L10nError):
    """
    表示与 Smartling API 交互时发生的错误。
    例如，认证失败、参数不合法或服务返回错误状态码。
    """

    def __init__(self, description: str, message: str, status_code: int) -> None:
        self.description = description
        self.status_code = status_code
        super().__init__(f"Failed {description}: {message} ({status_code})")
