from __future__ import annotations

import pytest

from src.umeedai.umeedai.common.validators import require_min_length, require_non_empty
from src.umeedai.umeedai.core.exceptions import ValidationError


def test_require_non_empty_strips():
    assert require_non_empty("  attendance_pct ", "factor") == "attendance_pct"

    with pytest.raises(ValidationError) as exc_info:
        require_non_empty("   ", "factor")
    assert exc_info.value.errors == [{"field": "factor", "message": "Required"}]


def test_require_min_length():
    with pytest.raises(ValidationError):
        require_min_length("ab", "factor", 3)

    assert require_min_length("abc", "factor", 3) == "abc"
