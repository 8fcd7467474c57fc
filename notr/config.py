# notr/config.py
import json
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Type

from notr.checkers import CHECKERS_BY_NAME, BaseAstroidChecker
from notr.checkers.static_checkers.tree_recursion_checker import DEFAULT_MAX_OPERATIONS
from notr.errors import ConfigError

MAX_OPERATIONS_KEY = 'max-operations'


class LinterConfig(NamedTuple):
    checkers: List[Type[BaseAstroidChecker]]
    max_operations: int = DEFAULT_MAX_OPERATIONS


def load_config(conf: Optional[Any] = None) -> LinterConfig:
    """
    체커 활성화 설정을 해석합니다.

    - conf 가 None 이면 등록된 모든 체커를 사용합니다.
    - conf 는 매핑이어야 하며, 체커 이름이 없으면 활성, 값이 True 일 때만 활성입니다.
    - 'max-operations' 키로 연산 카운터 한도를 바꿀 수 있습니다.
    """
    if conf is None:
        return LinterConfig(checkers=list(CHECKERS_BY_NAME.values()))

    if not isinstance(conf, Mapping):
        raise ConfigError(f"conf must be a mapping, got {type(conf).__name__}")

    checkers = []
    for name, checker_class in CHECKERS_BY_NAME.items():
        if name not in conf or conf[name] is True:
            checkers.append(checker_class)

    max_operations = conf.get(MAX_OPERATIONS_KEY, DEFAULT_MAX_OPERATIONS)
    if isinstance(max_operations, bool) or not isinstance(max_operations, int) or max_operations <= 0:
        raise ConfigError(f"'{MAX_OPERATIONS_KEY}' must be a positive integer, got {max_operations!r}")

    return LinterConfig(checkers=checkers, max_operations=max_operations)


def load_config_file(path: str) -> LinterConfig:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            conf: Dict[str, Any] = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"cannot read config file '{path}': {e}") from e
    return load_config(conf)
