# notr/core.py
import parso
import astroid
import logging
import os
import networkx as nx
from typing import List, Dict, Any, Optional
from networkx.readwrite import json_graph
import traceback

from notr.checkers import BaseAstroidChecker, TreeRecursionChecker
from notr.config import LinterConfig, load_config
from notr.errors import NotrError
from notr.utils import Span

logger = logging.getLogger(__name__)

MODES = ('realtime', 'static')


class Linter:
    def __init__(self, config: Optional[LinterConfig] = None):
        self.config = config or load_config()
        self.astroid_checkers: List[BaseAstroidChecker] = []
        self.errors: List[Dict[str, Any]] = []
        self.call_graph = nx.DiGraph()
        self.grammar: Optional[parso.Grammar] = None
        try:
            self.grammar = parso.load_grammar()
        except Exception as e:
            logger.warning("parso grammar could not be loaded: %s", e)

    def check_syntax(self, code: str) -> List[Dict[str, Any]]:
        """parso 의 에러 복구 파서로 모든 문법 오류를 수집합니다."""
        if not self.grammar:
            return []
        syntax_errors = []
        module = self.grammar.parse(code, error_recovery=True)
        for error in self.grammar.iter_errors(module):
            line, col = error.start_pos
            to_line, end_col = error.end_pos
            syntax_errors.append({
                'message': f"SyntaxError: {error.message}",
                'line': line, 'column': col, 'to_line': to_line, 'end_column': end_col,
                'errorType': 'SyntaxError',
            })
        return syntax_errors

    def add_message(self, msg_id: str, message: str):
        """위치 정보가 없는 메시지 (모듈 첫 줄에 보고)."""
        self.add_span_message(msg_id, Span(1, 0, 1, 1), message)

    def add_span_message(self, msg_id: str, span: Span, message: str):
        error_key = (msg_id, span.line, span.column, span.end_line, span.end_column)
        if not any(err.get('_key') == error_key for err in self.errors):
            self.errors.append({
                'message': message,
                'line': span.line,
                'column': span.column,
                'to_line': span.end_line,
                'end_column': span.end_column,
                'errorType': msg_id,
                '_key': error_key,
            })

    def _load_astroid_checkers(self):
        if not self.astroid_checkers:
            for CClass in self.config.checkers:
                try:
                    if CClass is TreeRecursionChecker:
                        self.astroid_checkers.append(CClass(self, max_operations=self.config.max_operations))
                    else:
                        self.astroid_checkers.append(CClass(self))
                except Exception as e:
                    self.add_message('CheckerInitError', f"Error initializing astroid checker {CClass.__name__}: {e}")

    def analyze_astroid(self, tree: astroid.Module):
        self._load_astroid_checkers()
        self.call_graph = nx.DiGraph()
        for checker in self.astroid_checkers:
            if checker.node_types and not isinstance(tree, checker.node_types):
                continue
            # 실패한 패스의 메시지는 남기지 않는다
            checkpoint = len(self.errors)
            try:
                checker.check(tree)
            except NotrError as e:
                del self.errors[checkpoint:]
                self.add_message('AstroidTraversalError', f"Error during Astroid AST traversal ({checker.NAME}): {e}")
            except Exception:
                del self.errors[checkpoint:]
                error_msg = f"Error in astroid checker {checker.NAME}: \n{traceback.format_exc()}"
                self.add_message('InternalAstroidCheckerError', error_msg)
            else:
                if isinstance(checker, TreeRecursionChecker):
                    self._add_recursion_graph(checker)

    def _add_recursion_graph(self, checker: TreeRecursionChecker):
        """분석된 함수마다 노드를, 트리 재귀가 보고된 함수마다 자기 루프 간선을 추가합니다."""
        session = checker.last_session
        if session is None:
            return
        for scope in session.scopes:
            func_node = session.functions.get(scope.scope_id)
            if func_node is None:
                continue
            self.add_node_to_graph(func_node.qname(), name=scope.name, lineno=func_node.fromlineno)

        for report in checker.last_reports:
            func_node = session.functions.get(report.scope)
            if func_node is None:
                continue
            qname = func_node.qname()
            if self.call_graph.has_edge(qname, qname):
                self.call_graph.edges[qname, qname]['count'] += 1
            else:
                self.call_graph.add_edge(qname, qname, lineno=report.start.line, count=1)

    def add_node_to_graph(self, node_name: str, **kwargs):
        if not isinstance(node_name, str) or not node_name: return
        if node_name not in self.call_graph: self.call_graph.add_node(node_name, **kwargs)


def analyze_code(code: str, mode: str = 'static', conf: Optional[Any] = None,
                 module_name: str = '<string>') -> Dict[str, Any]:
    """
    Python 코드에서 트리 재귀를 찾습니다.

    Args:
        code: 분석할 Python 코드 문자열.
        mode: 'realtime' (진단만) 또는 'static' (진단 + 재귀 그래프).
        conf: 체커 활성화 설정 (notr.config.load_config 참조) 또는 LinterConfig.
        module_name: astroid 모듈 이름.

    Returns:
        {'errors': [...], 'call_graph': node-link 딕셔너리 또는 None}
    """
    all_errors: List[Dict[str, Any]] = []
    call_graph_data: Optional[Dict[str, Any]] = None

    if mode not in MODES:
        all_errors.append({'message': f"Unknown analysis mode: {mode}", 'line': 1, 'column': 0, 'errorType': 'ModeError'})
        return {'errors': all_errors, 'call_graph': None}

    config = conf if isinstance(conf, LinterConfig) else load_config(conf)
    linter = Linter(config)

    syntax_errors = linter.check_syntax(code)
    if syntax_errors:
        return {'errors': syntax_errors, 'call_graph': None}

    astroid_tree = None
    try:
        astroid_tree = astroid.parse(code, module_name=module_name)
    except astroid.AstroidSyntaxError as e:
        error = getattr(e, 'error', None)
        all_errors.append({
            'message': f"SyntaxError: {getattr(error, 'msg', None) or e}",
            'line': getattr(error, 'lineno', None) or 1,
            'column': (getattr(error, 'offset', None) or 1) - 1,
            'errorType': 'SyntaxError',
        })
    except Exception as e:
        linter.add_message('AstroidParsingError', f"Error parsing with Astroid: {e}")

    if astroid_tree is not None:
        linter.analyze_astroid(astroid_tree)
        if mode == 'static':
            try:
                if linter.call_graph.nodes: call_graph_data = json_graph.node_link_data(linter.call_graph)
            except Exception as e: linter.add_message('GraphError', f"Failed to convert call graph: {e}")
    all_errors.extend(linter.errors)

    cleaned_errors = [{k: v for k, v in err.items() if k != '_key'} for err in all_errors]
    return {'errors': cleaned_errors, 'call_graph': call_graph_data}


def analyze_file(path: str, mode: str = 'static', conf: Optional[Any] = None) -> Dict[str, Any]:
    with open(path, 'r', encoding='utf-8') as f:
        code = f.read()
    module_name = os.path.splitext(os.path.basename(path))[0]
    return analyze_code(code, mode=mode, conf=conf, module_name=module_name)
