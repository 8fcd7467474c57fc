# notr/symbol_table.py
from __future__ import annotations
from typing import Dict, Optional, Set, Iterator


class FunctionScope:
    """함수 하나의 정규 이름과, 그 함수를 가리킬 수 있는 지역 별칭 테이블."""
    def __init__(self, scope_id: int, name: str):
        self.scope_id = scope_id
        self.name = name
        # alias -> 그 별칭에 대입된 적이 있는 원본 이름들
        self.aliases: Dict[str, Set[str]] = {}

    def add_alias(self, source_name: str, alias: str):
        self.aliases.setdefault(alias, set()).add(source_name)

    def refers_to_self(self, candidate: str) -> bool:
        """
        후보 이름이 이 함수를 가리킬 수 있는지 확인합니다.

        별칭 테이블은 키의 존재만 확인하고 원본 이름 집합은 따라가지 않습니다.
        즉 이 스코프에서 한 번이라도 대입된 이름은 함수 참조 후보로 취급됩니다.
        """
        return candidate == self.name or candidate in self.aliases

    def __repr__(self):
        return f"<FunctionScope id={self.scope_id} name='{self.name}' aliases={sorted(self.aliases)}>"


class ScopeRegistry:
    """한 번의 분석 패스 동안 유지되는 scope id -> FunctionScope 테이블."""
    def __init__(self):
        self._scopes: Dict[int, FunctionScope] = {}

    def register_function(self, scope_id: int, name: str) -> FunctionScope:
        # 같은 scope id 로 다시 들어와도 처음 등록한 이름을 유지한다
        scope = self._scopes.get(scope_id)
        if scope is None:
            scope = FunctionScope(scope_id, name)
            self._scopes[scope_id] = scope
        return scope

    def register_alias(self, scope_id: int, source_name: str, alias: str):
        scope = self._scopes.get(scope_id)
        if scope is None:
            return
        scope.add_alias(source_name, alias)

    def lookup(self, scope_id: int) -> Optional[FunctionScope]:
        return self._scopes.get(scope_id)

    def __contains__(self, scope_id: int) -> bool:
        return scope_id in self._scopes

    def __iter__(self) -> Iterator[FunctionScope]:
        return iter(self._scopes.values())

    def __len__(self) -> int:
        return len(self._scopes)
