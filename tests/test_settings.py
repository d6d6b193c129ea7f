from pathlib import Path

from promptlog.config import Settings
from promptlog.storage.database import mask_database_url


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("OPENAI_API_KEY", "DATABASE_URL", "PORT"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.openai_api_key is None
        assert settings.completion_model == "gpt-3.5-turbo"
        assert settings.completion_max_tokens == 300
        assert settings.system_prompt == (
            "You are an expert at writing corporate purpose statements."
        )
        assert settings.port == 3000
        assert settings.require_user_email is False

    def test_conventional_env_names(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db:5432/app")
        monkeypatch.setenv("PORT", "8080")

        settings = Settings(_env_file=None)

        assert settings.openai_api_key == "sk-env"
        assert settings.database_url == "postgresql://u:p@db:5432/app"
        assert settings.port == 8080

    def test_prefixed_env_names(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv("PROMPTLOG_REQUIRE_USER_EMAIL", "true")
        monkeypatch.setenv("PROMPTLOG_EXPORT_DIR", str(tmp_path))
        monkeypatch.setenv("PROMPTLOG_DATABASE_SSL", "1")

        settings = Settings(_env_file=None)

        assert settings.require_user_email is True
        assert settings.export_dir == tmp_path
        assert settings.database_ssl is True

    def test_field_names_accepted(self):
        settings = Settings(_env_file=None, openai_api_key="sk-init", port=9000)

        assert settings.openai_api_key == "sk-init"
        assert settings.port == 9000


class TestMaskDatabaseUrl:
    def test_password_masked(self):
        assert (
            mask_database_url("postgresql://user:secret@db:5432/app")
            == "postgresql://user:***@db:5432/app"
        )

    def test_url_without_password(self):
        url = "postgresql://localhost:5432/app"
        assert mask_database_url(url) == url
