import re
from pathlib import Path

import astroid
import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"

collect_ignore = ["fixtures"]

WANT_RE = re.compile(r'#\s*want\s+"(?P<message>[^"]+)"')


def parse_wants(source: str):
    """Collect (line, message) pairs from `# want "..."` comments."""
    wants = []
    for lineno, line in enumerate(source.splitlines(), start=1):
        match = WANT_RE.search(line)
        if match:
            wants.append((lineno, match.group("message")))
    return wants


@pytest.fixture
def cases_source() -> str:
    return (FIXTURES_DIR / "tree_recursion_cases.py").read_text(encoding="utf-8")


@pytest.fixture
def cases_tree(cases_source):
    return astroid.parse(cases_source, module_name="cases")
