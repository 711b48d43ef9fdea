from __future__ import annotations

from pathlib import Path

import pytest

from twmerge.merger import Merger

FIXTURES = Path(__file__).parent.parent / "fixtures"


@pytest.fixture
def tailwind_css() -> Path:
    return FIXTURES / "tailwind.css"


@pytest.fixture
def merger(tailwind_css: Path) -> Merger:
    """Merger that keeps input order, loaded with the Tailwind fixture."""
    m = Merger(keep_sort=True)
    with tailwind_css.open(encoding="utf-8") as fh:
        m.add_rules(fh)
    return m
