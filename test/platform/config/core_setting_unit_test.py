"""
Unit tests for Settings

Test Focus:
1. The shipped .env.example loads as-is
2. BACKEND_CORS_ORIGINS accepts a comma separated string or a JSON list
"""

from pathlib import Path

import pytest

from src.platform.config.core_setting import Settings


ENV_EXAMPLE = Path(__file__).resolve().parents[3] / '.env.example'


@pytest.mark.unit
class TestCorsOrigins:
    @pytest.fixture(autouse=True)
    def clear_cors_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv('BACKEND_CORS_ORIGINS', raising=False)

    def test_env_example_loads(self) -> None:
        settings = Settings(_env_file=ENV_EXAMPLE)  # type: ignore[call-arg]

        assert settings.BACKEND_CORS_ORIGINS == ['http://localhost:3000']
        assert settings.BUSINESS_TIMEZONE == 'Asia/Dubai'

    def test_comma_separated_origins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(
            'BACKEND_CORS_ORIGINS', 'http://localhost:3000, https://book.example.ae,'
        )

        settings = Settings(_env_file=None)  # type: ignore[call-arg]

        assert settings.BACKEND_CORS_ORIGINS == [
            'http://localhost:3000',
            'https://book.example.ae',
        ]

    def test_json_list_origins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv('BACKEND_CORS_ORIGINS', '["https://book.example.ae"]')

        settings = Settings(_env_file=None)  # type: ignore[call-arg]

        assert settings.BACKEND_CORS_ORIGINS == ['https://book.example.ae']

    def test_unset_means_no_origins(self) -> None:
        assert Settings(_env_file=None).BACKEND_CORS_ORIGINS == []  # type: ignore[call-arg]
