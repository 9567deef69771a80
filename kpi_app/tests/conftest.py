"""共用 fixture：暫存 DuckDB。"""

from __future__ import annotations

from typing import Iterator

import pytest

from kpi_app.storage.duckdb_client import DuckDBClient
from kpi_app.storage.schema import initialize_duckdb


@pytest.fixture
def duck_path(tmp_path) -> str:
    path = str(tmp_path / "kpi_test.duckdb")
    with DuckDBClient(db_path=path) as client:
        initialize_duckdb(client)
    return path


@pytest.fixture
def duck_client(duck_path) -> Iterator[DuckDBClient]:
    client = DuckDBClient(db_path=duck_path)
    client.connect()
    yield client
    client.close()
