"""异常定义"""

from typing import Optional


class ShakingNewsError(Exception):
    """所有异常的基类"""


class FetchError(ShakingNewsError):
    """上游请求失败"""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        source: Optional[str] = None,
    ):
        super().__init__(message)
        self.status = status
        self.source = source


class PayloadError(ShakingNewsError):
    """上游返回的数据结构不符合预期"""


class SettingsError(ShakingNewsError):
    """设置值无效"""

    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


class TierError(ShakingNewsError):
    """当前用户层级无权使用该功能"""

    def __init__(self, feature: str, required_tier: str):
        super().__init__(f"功能 {feature} 需要 {required_tier} 层级")
        self.feature = feature
        self.required_tier = required_tier
