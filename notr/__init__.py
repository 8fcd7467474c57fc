"""notr: detects tree recursion (a function calling itself two or more times in one expression)."""

from notr.call_analysis import Diagnostic, OpType
from notr.checkers.static_checkers.tree_recursion_checker import (
    AnalysisSession,
    TreeRecursionChecker,
    find_tree_recursion,
)
from notr.core import Linter, analyze_code, analyze_file

__version__ = '0.1.0'

__all__ = [
    'AnalysisSession', 'Diagnostic', 'Linter', 'OpType', 'TreeRecursionChecker',
    'analyze_code', 'analyze_file', 'find_tree_recursion',
]
