# notr/call_analysis.py
import logging
from enum import Enum
from typing import Dict, Iterator, List, NamedTuple

from notr.symbol_table import ScopeRegistry
from notr.utils import Span

logger = logging.getLogger(__name__)

TREE_RECURSION_THRESHOLD = 2


class OpType(Enum):
    CALL_IN_ARGS = 'call-in-call-arguments'
    CALL_IN_BIN_OP = 'call-in-binary-expression'


class CallSite(NamedTuple):
    """워커가 발견한 호출 하나."""
    op_no: int          # 같은 연산(operation)에 속한 호출끼리 공유하는 번호
    scope: int          # 호출이 일어난 함수 스코프 id
    op_type: OpType
    callee: str         # 함수 이름 또는 별칭, `recv.method` 형태일 수 있음
    span: Span


class Report:
    """연산 번호별로 집계되는 재귀 호출 보고."""
    def __init__(self, op_no: int, op_type: OpType, scope: int, func_name: str, start: Span):
        self.op_no = op_no
        self.op_type = op_type
        self.scope = scope
        self.func_name = func_name
        self.start = start
        self.count = 1

    def add(self, span: Span):
        self.count += 1
        if span.start < self.start.start:
            self.start = span

    def __repr__(self):
        return f"Report(op={self.op_no}, type={self.op_type.value}, func='{self.func_name}', count={self.count})"


class Diagnostic(NamedTuple):
    span: Span
    message: str
    function_name: str
    op_type: OpType


class CallRecorder:
    """발견 순서를 유지하는 append-only 호출 목록."""
    def __init__(self):
        self._calls: List[CallSite] = []

    def record(self, call: CallSite):
        self._calls.append(call)

    def __iter__(self) -> Iterator[CallSite]:
        return iter(self._calls)

    def __len__(self) -> int:
        return len(self._calls)


def analyze_calls(scopes: ScopeRegistry, calls: CallRecorder) -> List[Report]:
    """
    기록된 호출들을 스코프 이름/별칭과 대조하고 연산 번호별로 묶습니다.

    Returns:
        같은 연산 안에서 자기 자신을 2번 이상 호출한 보고 목록 (연산 번호 오름차순).
    """
    reports: Dict[int, Report] = {}

    for call in calls:
        func_scope = scopes.lookup(call.scope)
        if func_scope is None:
            continue

        if not func_scope.refers_to_self(call.callee):
            continue

        report = reports.get(call.op_no)
        if report is None:
            reports[call.op_no] = Report(call.op_no, call.op_type, call.scope, func_scope.name, call.span)
            continue

        if report.op_type is call.op_type:
            report.add(call.span)

    result = [r for r in reports.values() if r.count >= TREE_RECURSION_THRESHOLD]
    result.sort(key=lambda r: r.op_no)
    logger.debug("analyzed %d call sites: %d matched operations, %d tree recursion reports",
                 len(calls), len(reports), len(result))
    return result


def format_message(func_name: str) -> str:
    return f"tree recursion in call '{func_name}'"


def to_diagnostics(reports: List[Report]) -> List[Diagnostic]:
    return [Diagnostic(r.start, format_message(r.func_name), r.func_name, r.op_type) for r in reports]
