"""Tests for environment driven settings."""
import importlib
import logging

from faceguide.config import Settings, get_settings


class TestSettings:

    def test_defaults(self):
        settings = Settings.from_env({})
        assert settings.port == 3002
        assert settings.host == '0.0.0.0'
        assert settings.cors_origins == ('*',)
        assert settings.canvas_width == 600
        assert settings.max_canvas_width == 4096

    def test_environment_overrides(self):
        settings = Settings.from_env({
            'FACEGUIDE_PORT': '8080',
            'FACEGUIDE_CORS_ORIGINS': 'http://localhost:3000, https://example.org',
            'FACEGUIDE_LOG_LEVEL': 'debug',
            'UNRELATED': 'x',
        })
        assert settings.port == 8080
        assert settings.cors_origins == ('http://localhost:3000', 'https://example.org')
        assert settings.log_level == 'debug'

    def test_invalid_integer_keeps_default(self, caplog):
        settings = Settings.from_env({'FACEGUIDE_CANVAS_WIDTH': 'wide'})
        assert settings.canvas_width == 600
        assert 'FACEGUIDE_CANVAS_WIDTH' in caplog.text

    def test_cached(self):
        assert get_settings() is get_settings()

    def test_max_canvas_width_override(self):
        settings = Settings.from_env({'FACEGUIDE_MAX_CANVAS_WIDTH': '1024'})
        assert settings.max_canvas_width == 1024


class TestLoggingSetup:

    def test_import_leaves_logging_alone(self, monkeypatch):
        import faceguide.main
        calls = []
        monkeypatch.setattr(logging, 'basicConfig', lambda **kwargs: calls.append(kwargs))

        importlib.reload(faceguide.main)

        assert calls == []

    def test_run_configures_logging(self, monkeypatch):
        import uvicorn

        import faceguide.main
        calls = []
        monkeypatch.setattr(logging, 'basicConfig', lambda **kwargs: calls.append(kwargs))
        monkeypatch.setattr(uvicorn, 'run', lambda *args, **kwargs: None)

        faceguide.main.run()

        assert len(calls) == 1
        assert calls[0]['level'] == faceguide.main.settings.log_level.upper()
