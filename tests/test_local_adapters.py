"""Tests for the local adapters: settings store, notifier, navigator."""

import logging

from adapters.local.json_settings_store import JsonFileSettingsStore
from adapters.local.log_navigator import LogNavigatorAdapter
from adapters.local.log_notifier import LogNotificationAdapter
from adapters.local.log_progress import LogProgressAdapter


class TestJsonFileSettingsStore:
    def test_missing_file(self, tmp_path):
        store = JsonFileSettingsStore(str(tmp_path / "none.json"))
        assert store.get_api_url() is None

    def test_round_trip_and_clear(self, tmp_path):
        store = JsonFileSettingsStore(str(tmp_path / "nested" / "settings.json"))
        store.set_api_url("http://saved:9000")
        assert store.get_api_url() == "http://saved:9000"
        store.clear_api_url()
        assert store.get_api_url() is None
        assert store.path.exists()

    def test_keeps_other_keys(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text('{"theme": "dark"}')
        store = JsonFileSettingsStore(str(path))
        store.set_api_url("http://saved:9000")
        store.clear_api_url()
        assert '"theme": "dark"' in path.read_text()

    def test_corrupt_file(self, tmp_path, caplog):
        path = tmp_path / "settings.json"
        path.write_text("{not json")
        store = JsonFileSettingsStore(str(path))
        with caplog.at_level(logging.WARNING):
            assert store.get_api_url() is None
        assert "Could not load settings file" in caplog.text


class TestLogNotificationAdapter:
    def test_records_and_logs(self, caplog):
        notifier = LogNotificationAdapter()
        with caplog.at_level(logging.INFO):
            notifier.notify("success", "Processing completed!")
            notifier.notify("transport_error", "Failed to check job status")
        assert notifier.last == ("transport_error", "Failed to check job status")
        assert len(notifier.history) == 2
        assert "[transport_error] Failed to check job status" in caplog.text


class TestLogNavigatorAdapter:
    def test_go_to(self, caplog):
        navigator = LogNavigatorAdapter("http://api:8000/")
        with caplog.at_level(logging.INFO):
            navigator.go_to("b9")
        assert navigator.result_id == "b9"
        assert navigator.briefing_url("b9") == "http://api:8000/v1/briefings/b9"
        assert "http://api:8000/v1/briefings/b9/report" in caplog.text


class TestLogProgressAdapter:
    def test_logs_only_changes(self, caplog):
        progress = LogProgressAdapter()
        with caplog.at_level(logging.INFO):
            progress.report("j1", "PROCESSING", 40)
            progress.report("j1", "PROCESSING", 40)
            progress.report("j1", "PROCESSING", 55, detail="transcribing")
        lines = [r.getMessage() for r in caplog.records if r.name == "adapters.local.log_progress"]
        assert lines == ["[j1] processing 40%", "[j1] processing 55% - transcribing"]
