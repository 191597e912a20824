from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from expense_report.core.config import Settings
from expense_report.db.dal import Database
from expense_report.db.schema import init_db
from expense_report.main import create_app


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    s = Settings(data_dir=tmp_path, db_filename="test.sqlite3", debug=False)
    s.init_post_load()
    return s


@pytest.fixture
def db(settings: Settings) -> Database:
    init_db(settings.db_path)
    return Database(settings.db_path)


@pytest.fixture
def client(settings: Settings):
    app = create_app(settings_override=settings)
    with TestClient(app) as c:
        yield c
