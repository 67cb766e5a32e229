"""Tests for the server entry point."""

import app as app_module


class TestEntryPoint:
    """Test app construction and worker startup."""

    def test_create_application(self, monkeypatch):
        """The worker factory builds an app with lifespan wiring."""
        monkeypatch.setenv("BASE_URL", "https://brev.ly")

        application = app_module.create_application()

        assert application.state.config.base_url == "https://brev.ly"
        assert application.state.logger.name == "brevly"
        assert application.router.lifespan_context is app_module.lifespan

    def test_multiple_workers_use_import_string(self, monkeypatch):
        """WORKERS > 1 hands uvicorn the factory import string."""
        calls = []
        monkeypatch.setenv("WORKERS", "3")
        monkeypatch.setattr(app_module.uvicorn, "run", lambda target, **kwargs: calls.append((target, kwargs)))

        app_module.main()

        assert len(calls) == 1
        target, kwargs = calls[0]
        assert target == "app:create_application"
        assert kwargs["factory"] is True
        assert kwargs["workers"] == 3
