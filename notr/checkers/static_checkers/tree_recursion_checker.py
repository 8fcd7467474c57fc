# notr/checkers/static_checkers/tree_recursion_checker.py
import astroid
from astroid import nodes
import logging
import sys
from typing import Dict, List, Optional, Tuple

from notr.call_analysis import CallRecorder, CallSite, Diagnostic, OpType, Report, analyze_calls, to_diagnostics
from notr.checkers.base_checkers import BaseAstroidChecker
from notr.errors import (
    MalformedReceiverError,
    PassAbortedError,
    TooManyOperationsError,
    UnsupportedSelectorError,
)
from notr.symbol_table import ScopeRegistry
from notr.utils import (
    ASSIGNMENT_NODES,
    BINARY_EXPR_NODES,
    assignment_pairs,
    callee_name,
    function_display_name,
    iter_body_nodes,
    iter_subtree_calls,
    selector_name,
    span_of,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_OPERATIONS = sys.maxsize


class AnalysisSession:
    """
    한 컴파일 단위(모듈)에 대한 분석 상태.
    연산 카운터, 스코프 테이블, 호출 목록을 소유하며 패스마다 새로 만든다.
    """
    def __init__(self, max_operations: int = DEFAULT_MAX_OPERATIONS):
        self.op_no = 0
        self.max_operations = max_operations
        self.scopes = ScopeRegistry()
        self.calls = CallRecorder()
        self.functions: Dict[int, nodes.FunctionDef] = {}

    def inc_op(self):
        if self.op_no >= self.max_operations:
            raise TooManyOperationsError(self.max_operations)
        self.op_no += 1


class TreeRecursionWalker:
    """함수 선언마다 별칭과 호출 지점을 수집하는 워커."""
    def __init__(self, session: AnalysisSession):
        self.session = session

    def walk(self, tree: astroid.NodeNG):
        for func_node in tree.nodes_of_class(nodes.FunctionDef):
            try:
                self.visit_function(func_node)
            except (TooManyOperationsError, MalformedReceiverError) as err:
                raise PassAbortedError(func_node.qname(), err) from err

    def visit_function(self, func_node: nodes.FunctionDef):
        scope_no = self.session.op_no
        self.session.scopes.register_function(scope_no, function_display_name(func_node))
        self.session.functions.setdefault(scope_no, func_node)

        for assignment in iter_body_nodes(func_node, ASSIGNMENT_NODES):
            try:
                self._handle_assignment(assignment, scope_no)
            except UnsupportedSelectorError as e:
                logger.debug("line %s: %s", assignment.lineno, e)

        # a(a(1)) + a(2) 처럼 이항 연산 안의 호출
        for bin_expr in iter_body_nodes(func_node, BINARY_EXPR_NODES):
            self._preorder_nested_call(bin_expr, scope_no, OpType.CALL_IN_BIN_OP)

        # a(a(1), a(2)) 처럼 호출 인자 안의 호출
        for call in iter_body_nodes(func_node, nodes.Call):
            self._preorder_nested_call(call, scope_no, OpType.CALL_IN_ARGS)

        self.session.inc_op()

    def _handle_assignment(self, node: astroid.NodeNG, scope_no: int):
        self.session.inc_op()

        for targets, values in assignment_pairs(node):
            if len(targets) > len(values):
                # a, b = pair() 같은 언패킹은 정적으로 값을 알 수 없으므로 건너뛴다
                continue

            for target, value in zip(targets, values):
                if not isinstance(target, nodes.AssignName):
                    continue

                if isinstance(value, nodes.Name):
                    self.session.scopes.register_alias(scope_no, value.name, target.name)
                    continue

                if not isinstance(value, nodes.Attribute):
                    continue

                self.session.scopes.register_alias(scope_no, selector_name(value), target.name)

    def _preorder_nested_call(self, node: astroid.NodeNG, scope_no: int, op_type: OpType):
        self.session.inc_op()

        for call in iter_subtree_calls(node):
            self._register_call(scope_no, op_type, call)

    def _register_call(self, scope_no: int, op_type: OpType, call: nodes.Call):
        name = callee_name(call)
        if name is None:
            return

        self.session.calls.record(CallSite(
            op_no=self.session.op_no,
            scope=scope_no,
            op_type=op_type,
            callee=name,
            span=span_of(call),
        ))


def run_pass(tree: astroid.NodeNG, max_operations: int = DEFAULT_MAX_OPERATIONS) -> Tuple[AnalysisSession, List[Report]]:
    session = AnalysisSession(max_operations)
    TreeRecursionWalker(session).walk(tree)
    reports = analyze_calls(session.scopes, session.calls)
    logger.debug("tree recursion pass: %d scopes, %d call sites, %d reports",
                 len(session.scopes), len(session.calls), len(reports))
    return session, reports


def find_tree_recursion(tree: astroid.NodeNG, max_operations: int = DEFAULT_MAX_OPERATIONS) -> List[Diagnostic]:
    """모듈 하나를 분석하여 트리 재귀 진단 목록을 연산 순서대로 반환합니다."""
    _, reports = run_pass(tree, max_operations)
    return to_diagnostics(reports)


class TreeRecursionChecker(BaseAstroidChecker):
    """
    같은 연산(이항 연산 하나, 또는 호출 하나의 인자 목록) 안에서
    자기 자신을 두 번 이상 호출하는 함수/메서드를 탐지하는 체커.
    지역 변수 별칭(fn = fib)과 메서드 값(a = self.a)을 통한 호출도 추적합니다.
    """
    MSG_ID_PREFIX = 'W'
    NAME = 'tree-recursion'
    node_types = (nodes.Module,)
    MSGS = {
        '0802': (
            "tree recursion in call '%s'",
            'tree-recursion',
            'A function that calls itself two or more times within one expression branches '
            'its recursion, which usually costs exponential time (e.g. naive Fibonacci).'
        )
    }

    def __init__(self, linter, max_operations: int = DEFAULT_MAX_OPERATIONS):
        super().__init__(linter)
        self.max_operations = max_operations
        self.last_session: Optional[AnalysisSession] = None
        self.last_reports: List[Report] = []

    def check(self, node: nodes.Module):
        self.last_session, self.last_reports = None, []
        session, reports = run_pass(node, self.max_operations)
        self.last_session, self.last_reports = session, reports
        for report in reports:
            self.add_message(report.start, '0802', (report.func_name,))
