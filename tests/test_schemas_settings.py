"""Tests for payload schemas, timestamp rendering and environment settings."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from todo_api.errors import validation_message
from todo_api.schemas import TodoCreate, TodoOut, TodoUpdate, format_timestamp
from todo_api.settings import DEFAULT_ALLOWED_ORIGINS, Settings, get_settings


class TestSchemas:
    def test_create_strips_text(self):
        assert TodoCreate(text="\t hello \n").text == "hello"

    @pytest.mark.parametrize("payload", [{}, {"text": ""}, {"text": "  "}, {"text": 1}, {"text": ["a"]}])
    def test_create_rejects(self, payload):
        with pytest.raises(ValidationError) as exc_info:
            TodoCreate.model_validate(payload)
        assert validation_message(exc_info.value.errors()) == "Text is required and cannot be empty"

    def test_update_requires_a_field(self):
        with pytest.raises(ValidationError) as exc_info:
            TodoUpdate.model_validate({})
        assert validation_message(exc_info.value.errors()) == "No valid fields to update"

    def test_update_reports_text_before_completed(self):
        with pytest.raises(ValidationError) as exc_info:
            TodoUpdate.model_validate({"text": "", "completed": "no"})
        assert validation_message(exc_info.value.errors()) == "Text cannot be empty"

    def test_update_keeps_unsupplied_fields_unset(self):
        patch = TodoUpdate.model_validate({"completed": False})
        assert patch.completed is False
        assert patch.text is None

    def test_todo_out_uses_camel_case_timestamp(self):
        out = TodoOut(id=1, text="x", completed=False, created_at=datetime(2024, 5, 1, 12, 30, 45, 123456, tzinfo=timezone.utc))
        assert out.model_dump(mode="json", by_alias=True) == {
            "id": 1,
            "text": "x",
            "completed": False,
            "createdAt": "2024-05-01T12:30:45.123Z",
        }

    def test_format_timestamp_converts_to_utc(self):
        cet = timezone(timedelta(hours=1))
        assert format_timestamp(datetime(2024, 1, 1, 1, 0, 0, tzinfo=cet)) == "2024-01-01T00:00:00.000Z"

    def test_format_timestamp_treats_naive_as_utc(self):
        assert format_timestamp(datetime(2024, 1, 1, 8, 9, 10, 5000)) == "2024-01-01T08:09:10.005Z"

    def test_validation_message_prefers_path_errors(self):
        errors = [{"loc": ("path", "todo_id"), "type": "int_parsing", "msg": "bad"}]
        assert validation_message(errors) == "Invalid todo ID"
        assert validation_message([{"loc": ("body",), "type": "missing"}], default="fallback") == "fallback"


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("PORT", "HOST", "FRONTEND_URL", "SQLITE_DB_PATH", "LOG_LEVEL", "APP_ENV"):
            monkeypatch.delenv(name, raising=False)
        s = get_settings()
        assert s.port == 3001
        assert s.host == "0.0.0.0"
        assert s.sqlite_db_path == "todos.db"
        assert s.environment == "development"
        assert s.allowed_origins == list(DEFAULT_ALLOWED_ORIGINS)

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("FRONTEND_URL", "https://todo.example.com")
        monkeypatch.setenv("SQLITE_DB_PATH", "/tmp/elsewhere.db")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("APP_ENV", "production")
        s = get_settings()
        assert s.port == 8080
        assert s.sqlite_db_path == "/tmp/elsewhere.db"
        assert s.log_level == "debug"
        assert s.environment == "production"
        assert s.allowed_origins[-1] == "https://todo.example.com"

    def test_bad_port_falls_back(self, monkeypatch):
        monkeypatch.setenv("PORT", "not-a-port")
        assert get_settings().port == 3001

    def test_empty_frontend_url_is_ignored(self, monkeypatch):
        monkeypatch.setenv("FRONTEND_URL", "  ")
        assert get_settings().frontend_url is None

    def test_frontend_url_not_duplicated(self):
        s = Settings(frontend_url="http://localhost:3000")
        assert s.allowed_origins.count("http://localhost:3000") == 1
