import astroid
from typing import Dict, Tuple, Optional
import sys

from notr.utils import Span

class BaseAstroidChecker:
    """Astroid 기반 체커의 베이스 클래스."""
    MSG_ID_PREFIX = 'E'
    NAME = 'base-astroid-checker'
    MSGS: Dict[str, Tuple[str, str, str]] = {}
    node_types: Tuple[type, ...] = ()
    def __init__(self, linter): self.linter = linter
    def add_message(self, span: Span, msg_key: str, args: Optional[Tuple]=None):
        if self.NAME == 'base-astroid-checker': return
        if msg_key in self.MSGS:
            final_message = (self.MSGS[msg_key][0] % args) if args else self.MSGS[msg_key][0]
            self.linter.add_span_message(f"{self.MSG_ID_PREFIX}{msg_key}", span, final_message)
        else: print(f"Warning: Unknown msg key '{msg_key}' in {self.NAME}", file=sys.stderr)
    def check(self, node: astroid.NodeNG): raise NotImplementedError
