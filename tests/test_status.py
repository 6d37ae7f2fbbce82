import pytest

from core.status import HOLD, SEARCHING, progress_percent, project_status


@pytest.mark.parametrize(
    "counter,threshold,has_candidate,expected",
    [
        (0, 20, False, SEARCHING),
        (0, 20, True, HOLD),
        (10, 20, True, "Hold steady... 50%"),
        (10, 20, False, "Hold steady... 50%"),
        (19, 20, True, "Hold steady... 95%"),
        (1, 40, True, "Hold steady... 3%"),
    ],
)
def test_project_status(counter, threshold, has_candidate, expected):
    assert project_status(counter, threshold, has_candidate) == expected


def test_progress_rounds_half_up():
    assert progress_percent(1, 8) == 13  # 12.5
    assert progress_percent(1, 3) == 33
