import sys
from pathlib import Path

import pytest

# Ensure src/ is on sys.path for local test runs without installation
PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from qvd_factory import FieldLayout, build_qvd, int_symbol, text_symbol  # noqa: E402


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "unit: fast unit tests")
    config.addinivalue_line(
        "markers",
        "integration: tests that exercise the full load pipeline from disk",
    )


@pytest.fixture
def minimal_qvd() -> bytes:
    """One integer field with symbols 1, 2, 3 and rows pointing at 0, 1, 2."""
    return build_qvd(
        [
            FieldLayout(
                name="Number",
                symbols=int_symbol(1) + int_symbol(2) + int_symbol(3),
                raw_indexes=[0, 1, 2],
                bit_width=2,
            )
        ]
    )


@pytest.fixture
def quarters_qvd() -> bytes:
    """Month / Quarter table with twelve rows across two fields."""
    months = b"".join(int_symbol(i) for i in range(1, 13))
    quarters = b"".join(text_symbol(f"Q{i}") for i in range(1, 5))
    return build_qvd(
        [
            FieldLayout(
                name="Month",
                symbols=months,
                raw_indexes=list(range(12)),
                bit_width=4,
                symbol_count=12,
            ),
            FieldLayout(
                name="Quarter",
                symbols=quarters,
                raw_indexes=[i // 3 for i in range(12)],
                bit_width=2,
                symbol_count=4,
            ),
        ],
        table_name="Calendar",
    )


@pytest.fixture
def qvd_file(tmp_path: Path, quarters_qvd: bytes) -> Path:
    path = tmp_path / "calendar.qvd"
    path.write_bytes(quarters_qvd)
    return path
