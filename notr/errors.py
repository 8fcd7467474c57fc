# notr/errors.py
from typing import Optional


class NotrError(Exception):
    """분석 패스에서 발생하는 모든 오류의 베이스 클래스."""


class TooManyOperationsError(NotrError):
    """세션의 연산 카운터가 한도에 도달함 (패스 중단)."""

    def __init__(self, limit: int):
        super().__init__(f"operations limit exceeded: {limit}")
        self.limit = limit


class MalformedReceiverError(NotrError):
    """메서드 선언에 리시버 이름이 될 매개변수가 하나도 없음 (패스 중단)."""

    def __init__(self, method_name: str, lineno: Optional[int] = None):
        super().__init__(f"no receiver parameter found for method '{method_name}' (line {lineno})")
        self.method_name = method_name
        self.lineno = lineno


class UnsupportedSelectorError(NotrError):
    """속성 접근의 리시버가 단순 이름이 아님 (예: `a.b.c`, `f().x`). 해당 구문만 건너뛴다."""


class ConfigError(NotrError):
    pass


class PassAbortedError(NotrError):
    """치명적 오류로 분석 패스가 중단됨. 원인은 __cause__ 로 연결된다."""

    def __init__(self, where: str, cause: Exception):
        super().__init__(f"analysis pass aborted in '{where}': {cause}")
        self.where = where
