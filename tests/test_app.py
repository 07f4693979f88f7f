from datetime import date, timedelta

from fastapi.testclient import TestClient

from taskflow.allocation.app import app, create_catalog, create_quota_service
from taskflow.allocation.catalog.file import JsonFileAccountCatalog
from taskflow.allocation.catalog.sql import SqlAccountCatalog
from taskflow.allocation.db.engine import create_engine
from taskflow.allocation.settings import TaskflowSettings

client = TestClient(app)


def test_health():
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_file_catalog_backend(tmp_path):
    settings = TaskflowSettings(_env_file=None, catalog_backend="file", catalog_file=str(tmp_path / "a.json"))
    catalog, engine = create_catalog(settings, None)
    assert isinstance(catalog, JsonFileAccountCatalog)
    assert engine is None


def test_sql_catalog_shares_store_engine():
    settings = TaskflowSettings(_env_file=None, database_url="postgresql+psycopg://u:p@localhost/store")
    store = create_engine(settings.database_url)
    catalog, engine = create_catalog(settings, store)
    assert isinstance(catalog, SqlAccountCatalog)
    assert engine is None


def test_sql_catalog_gets_dedicated_engine():
    settings = TaskflowSettings(
        _env_file=None,
        database_url="postgresql+psycopg://u:p@localhost/store",
        catalog_database_url="postgresql+psycopg://u:p@localhost/crm",
    )
    catalog, engine = create_catalog(settings, None)
    assert isinstance(catalog, SqlAccountCatalog)
    assert engine is not None
    assert engine.url.database == "crm"


def test_no_catalog_without_database():
    settings = TaskflowSettings(_env_file=None, database_url=None, catalog_database_url=None)
    assert create_catalog(settings, None) == (None, None)


def test_quota_service_uses_rest_day_policy(tmp_path):
    week = [date(2025, 6, 2) + timedelta(days=i) for i in range(7)]
    catalog = JsonFileAccountCatalog(tmp_path / "a.json")

    default = create_quota_service(TaskflowSettings(_env_file=None), catalog)
    assert [default.is_rest_day(d) for d in week] == [False] * 6 + [True]

    every_day = create_quota_service(TaskflowSettings(_env_file=None, rest_weekday=None), catalog)
    assert not any(every_day.is_rest_day(d) for d in week)
