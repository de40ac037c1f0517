"""
Pytest fixtures for the maintenance dashboard tests.

Provides small deterministic record frames (the three-record May sample used
throughout) and a larger seeded mock collection.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from maintenance_dashboard.data import Record, generate_mock_records, records_frame  # noqa: E402


@pytest.fixture
def may_records():
    """Three May requests: two Kota Kinabalu, one Sandakan."""
    return records_frame(
        [
            Record("REQ-1001", "SK St Francis", "Kota Kinabalu", "ADUN", "Completed", "2024-05-03"),
            Record("REQ-1002", "SMK Elopura", "Sandakan", "ADUN", "In Progress", "2024-05-14"),
            Record("REQ-1003", "SMK Likas", "Kota Kinabalu", "Other", "Completed", "2024-05-27"),
        ]
    )


@pytest.fixture
def mixed_records():
    """Records spread over several months, including one malformed date."""
    return records_frame(
        [
            {"id": "REQ-1", "institution": "SK Pekan Ranau", "office": "Ranau", "category": "MP",
             "status": "Completed", "date": "2024-01-10"},
            {"id": "REQ-2", "institution": "SMK Tawau", "office": "Tawau", "category": "MP & ADUN",
             "status": "In Progress", "date": "2024-02-11"},
            {"id": "REQ-3", "institution": "SK Tanjung Aru", "office": "Kota Kinabalu", "category": "ADUN",
             "status": "Completed", "date": "2024-01-20"},
            {"id": "REQ-4", "institution": "SMK Badin", "office": "Tuaran", "category": "Other",
             "status": "Completed", "date": "2024-13-40"},
            {"id": "REQ-5", "institution": "SK Kudat II", "office": "Tawau", "category": "MP",
             "status": "In Progress", "date": "2024-02-02"},
            {"id": "REQ-6", "institution": "SMK Beaufort", "office": "Ranau", "category": "Other",
             "status": "Completed", "date": "2024-02-28"},
        ]
    )


@pytest.fixture(scope="session")
def mock_records():
    return generate_mock_records(200, seed=7)
