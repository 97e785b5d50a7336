"""Re-export test helpers from parent conftest for regression tests."""

from __future__ import annotations

import sys
from pathlib import Path

# Add tests directory to path so we can import from parent conftest
tests_dir = Path(__file__).parent.parent
sys.path.insert(0, str(tests_dir))

from conftest import (  # noqa: E402
    DECISIONS_DIR,
    decision_table_node,
    expression_node,
    make_linear_graph,
)

__all__ = ["DECISIONS_DIR", "decision_table_node", "expression_node", "make_linear_graph"]
