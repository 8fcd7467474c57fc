# notr/utils.py
from astroid import nodes
from typing import Iterator, List, NamedTuple, Optional, Tuple, Type, Union

from notr.errors import MalformedReceiverError, UnsupportedSelectorError

# 본문 순회 시 건너뛰는 노드: 중첩 함수/클래스는 자기 스코프에서 따로 분석된다
NESTED_SCOPE_NODES: Tuple[type, ...] = (nodes.FunctionDef, nodes.ClassDef)

BINARY_EXPR_NODES: Tuple[type, ...] = (nodes.BinOp, nodes.BoolOp, nodes.Compare)
ASSIGNMENT_NODES: Tuple[type, ...] = (nodes.Assign, nodes.AnnAssign, nodes.AugAssign, nodes.NamedExpr)

AssignTarget = Union[nodes.AssignName, nodes.AssignAttr, nodes.Subscript, nodes.Starred, nodes.Name]


class Span(NamedTuple):
    """소스 위치 (1-based line, 0-based column)."""
    line: int
    column: int
    end_line: int
    end_column: int

    @property
    def start(self) -> Tuple[int, int]:
        return (self.line, self.column)


def span_of(node: nodes.NodeNG) -> Span:
    line = node.fromlineno or 1
    col = node.col_offset or 0
    to_line = node.end_lineno or line
    end_col = node.end_col_offset or (col + 1)
    line, col = max(1, line), max(0, col)
    to_line = max(line, to_line)
    if to_line == line:
        end_col = max(col + 1, end_col)
    return Span(line, col, to_line, end_col)


def iter_body_nodes(func_node: nodes.FunctionDef, klass: Union[Type, Tuple[type, ...]]) -> Iterator[nodes.NodeNG]:
    """
    함수 본문에서 klass 타입의 노드를 전위 순회(preorder)로 찾습니다.
    데코레이터, 기본값, 어노테이션은 바깥 스코프에서 평가되므로 제외하고,
    중첩된 def/class 의 내부로는 내려가지 않습니다.
    """
    for stmt in func_node.body:
        if isinstance(stmt, NESTED_SCOPE_NODES):
            continue
        yield from stmt.nodes_of_class(klass, skip_klass=NESTED_SCOPE_NODES)


def iter_subtree_calls(node: nodes.NodeNG) -> Iterator[nodes.Call]:
    """node 자신을 포함한 서브트리의 모든 Call 노드 (중첩 def/class 제외)."""
    yield from node.nodes_of_class(nodes.Call, skip_klass=NESTED_SCOPE_NODES)


def selector_name(node: nodes.Attribute) -> str:
    """`recv.attr` 형태의 이름을 만듭니다. recv 가 단순 이름이 아니면 UnsupportedSelectorError."""
    if not isinstance(node.expr, nodes.Name):
        raise UnsupportedSelectorError(
            f"skip unsupported selector receiver type: {type(node.expr).__name__}"
        )
    return f"{node.expr.name}.{node.attrname}"


def callee_name(call: nodes.Call) -> Optional[str]:
    """호출 대상 이름. 해석할 수 없는 형태면 None."""
    func = call.func
    if isinstance(func, nodes.Name):
        return func.name
    if isinstance(func, nodes.Attribute):
        try:
            return selector_name(func)
        except UnsupportedSelectorError:
            return None
    return None


def function_display_name(func_node: nodes.FunctionDef) -> str:
    """
    함수의 정규 이름을 계산합니다.

    - 일반 함수 / 중첩 함수: 선언된 이름
    - 메서드: 첫 번째 위치 매개변수 이름 + '.' + 메서드 이름 (예: self.fib, cls.build)
    - 위치 매개변수 없이 *args 만 있는 메서드: vararg 이름을 리시버로 사용 (예: args.m)
    - staticmethod: 리시버가 없으므로 클래스 이름을 리시버로 사용 (예: Tree.walk)
    """
    if not func_node.is_method():
        return func_node.name

    if func_node.type == 'staticmethod':
        klass = func_node.parent.frame()
        return f"{klass.name}.{func_node.name}"

    receiver_params: List[nodes.AssignName] = list(func_node.args.posonlyargs or []) + list(func_node.args.args or [])
    if receiver_params:
        return f"{receiver_params[0].name}.{func_node.name}"
    # def m(*args): 인스턴스는 args[0] 으로 전달된다
    if func_node.args.vararg:
        return f"{func_node.args.vararg}.{func_node.name}"
    raise MalformedReceiverError(func_node.name, func_node.lineno)


def assignment_pairs(node: nodes.NodeNG) -> Iterator[Tuple[List[AssignTarget], List[nodes.NodeNG]]]:
    """
    할당문을 (왼쪽 대상 목록, 오른쪽 값 목록) 쌍으로 정규화합니다.
    `a = b = f` 처럼 대상이 여러 개인 경우 대상마다 한 쌍을 만듭니다.
    """
    if isinstance(node, nodes.Assign):
        for target in node.targets:
            yield _unpack(target, node.value)
    elif isinstance(node, nodes.AnnAssign):
        if node.value is not None:
            yield _unpack(node.target, node.value)
    elif isinstance(node, (nodes.AugAssign, nodes.NamedExpr)):
        yield [node.target], [node.value]


def _unpack(target: nodes.NodeNG, value: nodes.NodeNG) -> Tuple[List[AssignTarget], List[nodes.NodeNG]]:
    if isinstance(target, (nodes.Tuple, nodes.List)):
        if isinstance(value, (nodes.Tuple, nodes.List)):
            return list(target.elts), list(value.elts)
        return list(target.elts), [value]
    return [target], [value]
