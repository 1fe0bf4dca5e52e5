import pytest

from core.utils.formatting import format_size


@pytest.mark.parametrize(
    ("num_bytes", "expected"),
    [
        (0, "0 B"),
        (-3, "0 B"),
        (512, "512.00 B"),
        (1024, "1.00 KB"),
        (1536 * 1024, "1.50 MB"),
        (100 * 1024 * 1024, "100.00 MB"),
        (5 * 1024**4, "5.00 TB"),
        (2 * 1024**6, "2048.00 PB"),
    ],
)
def test_format_size(num_bytes, expected):
    assert format_size(num_bytes) == expected
