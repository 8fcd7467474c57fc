# checkers/__init__.py

# 1. Base 클래스 import
from notr.checkers.base_checkers import BaseAstroidChecker

# 2. Astroid 체커 import
from notr.checkers.static_checkers.tree_recursion_checker import TreeRecursionChecker

# 3. 외부에서 사용할 체커 목록 정의 (이름 -> 클래스)
STATIC_CHECKERS_CLASSES = [
    TreeRecursionChecker,
]

CHECKERS_BY_NAME = {checker.NAME: checker for checker in STATIC_CHECKERS_CLASSES}

__all__ = [
    'BaseAstroidChecker',
    'TreeRecursionChecker',
    'STATIC_CHECKERS_CLASSES', 'CHECKERS_BY_NAME',
]
