"""Тесты конвейера точки входа."""

import logging

import catalog_engine.__main__ as entry
from catalog_engine.config import (
    CatalogApiSettings,
    DatabaseSettings,
    LogSettings,
    PipelineSettings,
    Settings,
)
from catalog_engine.models import FilterState
from catalog_engine.repositories import SQLiteKeyValueStore
from catalog_engine.services import FilterPresetService
from tests.conftest import FakeCatalogApi


class ClosableFakeApi(FakeCatalogApi):
    closed = False

    async def close(self) -> None:
        self.closed = True


def make_settings(db_path: str, edit_product_id: str = "") -> Settings:
    return Settings(
        api=CatalogApiSettings(base_url="http://catalog.test", api_token="", timeout=5),
        pipeline=PipelineSettings(
            page_size=2,
            price_ceiling=1000.0,
            search_debounce=0.3,
            filter_debounce=0.5,
            edit_product_id=edit_product_id,
        ),
        database=DatabaseSettings(db_path=db_path),
        log=LogSettings(level="INFO", file_path=""),
    )


class TestRunPipeline:
    """Один цикл загрузки каталога."""

    async def test_summary(self, tmp_path, monkeypatch):
        fake = ClosableFakeApi(
            vocabulary=None,
            pages={1: {"products": [{"id": 1, "price": "10"}]}},
            detail={"id": "p9", "product_stores": [{"store_id": "s1"}]},
            stores=[{"store_id": "s1", "price": 15}],
        )
        monkeypatch.setattr(entry, "create_catalog_api", lambda settings: fake)
        settings = make_settings(str(tmp_path / "kv.db"), edit_product_id="p9")

        summary = await entry.run_pipeline(settings)

        assert summary["categories"]["source"] == "builtin"
        assert summary["catalog"]["products"][0]["id"] == "1"
        assert summary["catalog"]["page_window"] == [1]
        assert summary["edit_product"]["stores"][0]["price"] == 15.0
        assert fake.page_requests[0].page_size == 2
        assert fake.closed is True

    async def test_default_preset_applied(self, tmp_path, monkeypatch):
        db_path = str(tmp_path / "kv.db")
        store = SQLiteKeyValueStore(db_path)
        store.initialize()
        FilterPresetService(store).save("default", FilterState(colors=frozenset({"Black"})))
        store.close()

        fake = ClosableFakeApi()
        monkeypatch.setattr(entry, "create_catalog_api", lambda settings: fake)

        summary = await entry.run_pipeline(make_settings(db_path))

        assert fake.page_requests[0].colors == frozenset({"Black"})
        assert "edit_product" not in summary

    async def test_stages_logged(self, tmp_path, monkeypatch, caplog):
        fake = ClosableFakeApi(pages={1: {"products": [{"id": 1}]}})
        monkeypatch.setattr(entry, "create_catalog_api", lambda settings: fake)

        with caplog.at_level(logging.INFO, logger="main"):
            await entry.run_pipeline(make_settings(str(tmp_path / "kv.db")))

        stages = [
            r.context_data["stage"]
            for r in caplog.records
            if r.getMessage() == "stage_completed"
        ]
        assert stages == ["vocabulary", "catalog_page"]
