"""
CrudHub Backend — Settings Validation Tests
=============================================

What:  Tests for Settings parsing and validation.
Why:   Bad resource lists would mount routers on clashing or invalid prefixes.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from crudhub.config import Settings


class TestResourceLists:

    def test_csv_parsing_trims_blanks(self):
        settings = Settings(memory_resources=" teas , ,biscuits ", document_resources="")

        assert settings.memory_resources_list == ["teas", "biscuits"]
        assert settings.document_resources_list == []

    def test_duplicate_across_lists_rejected(self):
        with pytest.raises(PydanticValidationError, match="more than once"):
            Settings(memory_resources="teas,games", document_resources="games")

    @pytest.mark.parametrize("name", ["Teas", "1teas", "te as", "teas/x"])
    def test_invalid_name_rejected(self, name):
        with pytest.raises(PydanticValidationError, match="Invalid resource name"):
            Settings(memory_resources=name, document_resources="")


class TestServerSettings:

    def test_defaults(self):
        settings = Settings(_env_file=None, database_url="sqlite+aiosqlite:///x.db")

        assert settings.backend_port == 5000
        assert settings.cors_origins_list == ["*"]
        assert settings.api_prefix == "/api"
        assert settings.fail_fast_on_store_error is True

    @pytest.mark.parametrize(
        "raw, expected",
        [("/api", "/api"), ("api/", "/api"), ("/v2/", "/v2"), ("/", "")],
    )
    def test_api_prefix_normalized(self, raw, expected):
        assert Settings(api_prefix=raw).api_prefix == expected

    def test_log_level_upper_cased(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_log_level_invalid(self):
        with pytest.raises(PydanticValidationError, match="Invalid log_level"):
            Settings(log_level="chatty")

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("MEMORY_RESOURCES", "snacks")
        monkeypatch.setenv("FAIL_FAST_ON_STORE_ERROR", "false")

        settings = Settings()

        assert settings.memory_resources_list == ["snacks"]
        assert settings.fail_fast_on_store_error is False
