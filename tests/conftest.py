from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.fake_ctags import FakeCtags
from tests._fixtures.sketch_builder import SketchBuilder


@pytest.fixture
def sketch_builder(tmp_path: Path) -> SketchBuilder:
    """Provide a sketch project named ``Blink`` rooted at the pytest tmp_path."""
    return SketchBuilder(tmp_path)


@pytest.fixture
def fake_ctags() -> FakeCtags:
    return FakeCtags()
