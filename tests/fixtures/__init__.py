"""
Sample statements for tests.

SAMPLE_STATEMENTS mirrors what the upload screens record: two partial
January statements and one February statement for 2024.
"""

from baucher_match.state_store import StatementRecord

SAMPLE_STATEMENTS = [
    {
        "filename": "estado_cuenta_ENERO_2024.csv",
        "month": "Ene",
        "year": 2024,
        "ingreso": 100.0,
        "total_count": 2,
        "processed_at": "2024-02-01T09:00:00Z",
    },
    {
        "filename": "estado_cuenta_ENERO_2024_parcial.csv",
        "month": "Ene",
        "year": 2024,
        "ingreso": 50.0,
        "total_count": 1,
        "processed_at": "2024-02-02T09:00:00Z",
    },
    {
        "filename": "estado_cuenta_FEBRERO_2024.csv",
        "month": "Feb",
        "year": 2024,
        "ingreso": 10.0,
        "total_count": 1,
        "processed_at": "2024-03-01T09:00:00Z",
    },
]


def make_record(**overrides) -> StatementRecord:
    """StatementRecord with sensible defaults, ready for insert."""
    fields = {
        "filename": "jan.pdf",
        "month": "Ene",
        "year": 2024,
        "ingreso": 1234.56,
        "total_count": 42,
        "processed_at": "2024-01-15T10:00:00Z",
    }
    fields.update(overrides)
    return StatementRecord(**fields)
