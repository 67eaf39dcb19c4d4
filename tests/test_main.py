import todo_api.main as main_module


class TestEntryPoint:
    def test_import_builds_no_app(self):
        assert not hasattr(main_module, "app")

    def test_run_serves_the_factory(self, monkeypatch):
        calls = []
        monkeypatch.setattr(main_module.uvicorn, "run", lambda target, **kwargs: calls.append((target, kwargs)))
        monkeypatch.setenv("PORT", "8123")
        monkeypatch.setenv("HOST", "127.0.0.1")
        main_module.run()
        assert len(calls) == 1
        target, kwargs = calls[0]
        assert target == "todo_api.main:create_app"
        assert kwargs["factory"] is True
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 8123
