"""Tests for catalog loading and descriptor validation."""

import json

import pytest

from api_sandbox.catalog import Catalog, default_catalog, load_catalog, parse_catalog
from api_sandbox.sandbox_types import ApiDescriptor, AuthType, CatalogError, UnknownApiError

RECORD = {
    "id": "news-api",
    "name": "News API",
    "category": "News",
    "authRequired": True,
    "authType": "API Key",
    "endpoint": "https://newsapi.org/v2/top-headlines?country=us",
    "docsUrl": "https://newsapi.org/",
    "mockResponse": {"status": "ok", "articles": []},
    "quiz": [{"question": "Proxy?", "options": ["Yes", "No"], "correctAnswer": 0}],
}


class TestDescriptor:

    def test_camel_case_record(self):
        api = ApiDescriptor.model_validate(RECORD)

        assert api.endpoint_template == RECORD["endpoint"]
        assert api.auth_required is True
        assert api.auth_type is AuthType.API_KEY
        assert api.docs_url == "https://newsapi.org/"
        assert api.quiz[0].correct_answer == 0

    def test_frozen(self):
        api = ApiDescriptor.model_validate(RECORD)
        with pytest.raises(Exception):
            api.endpoint_template = "https://evil.test"

    @pytest.mark.parametrize("raw", ["apikey", "API_KEY", "Api Key"])
    def test_auth_type_spellings(self, raw):
        assert AuthType(raw) is AuthType.API_KEY

    def test_gated_api_needs_mock(self):
        record = {**RECORD, "mockResponse": None}
        with pytest.raises(ValueError):
            ApiDescriptor.model_validate(record)

    def test_display_name_falls_back_to_id(self):
        api = ApiDescriptor(id="x", endpoint_template="https://x.test")
        assert api.display_name == "x"


class TestParseCatalog:

    def test_builds_mapping(self):
        catalog = parse_catalog([RECORD])

        assert isinstance(catalog, Catalog)
        assert list(catalog) == ["news-api"]
        assert "news-api" in catalog
        assert catalog["news-api"].name == "News API"

    def test_unknown_id(self):
        catalog = parse_catalog([RECORD])

        with pytest.raises(UnknownApiError) as exc_info:
            catalog["nope"]
        assert "news-api" in str(exc_info.value)
        assert catalog.get("nope") is None

    def test_duplicate_ids_rejected(self):
        with pytest.raises(CatalogError, match="Duplicate"):
            parse_catalog([RECORD, RECORD])

    def test_invalid_record_reported_by_id(self):
        with pytest.raises(CatalogError, match="news-api"):
            parse_catalog([{**RECORD, "mockResponse": None}])

    def test_non_object_record(self):
        with pytest.raises(CatalogError):
            parse_catalog(["not a record"])

    def test_bad_quiz_answer(self):
        record = {**RECORD, "quiz": [{"question": "?", "options": ["a"], "correctAnswer": 3}]}
        with pytest.raises(CatalogError):
            parse_catalog([record])


class TestLoadCatalog:

    def test_list_file(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps([RECORD]), encoding="utf-8")

        assert len(load_catalog(path)) == 1

    def test_wrapped_file(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps({"apis": [RECORD]}), encoding="utf-8")

        assert list(load_catalog(str(path))) == ["news-api"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogError):
            load_catalog(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text("{nope", encoding="utf-8")
        with pytest.raises(CatalogError):
            load_catalog(path)

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps({"items": []}), encoding="utf-8")
        with pytest.raises(CatalogError):
            load_catalog(path)


class TestDefaultCatalog:

    def test_packaged_catalog_loads(self):
        catalog = default_catalog()

        assert len(catalog) == 20
        assert "openweathermap" in catalog
        assert "cat-facts" in catalog
        assert default_catalog() is catalog

    def test_gated_apis_carry_mocks(self):
        gated = default_catalog().requiring_auth()

        assert {a.id for a in gated} >= {"openweathermap", "news-api", "exchange-rate"}
        assert all(a.mock_response is not None for a in gated)

    def test_categories(self):
        categories = default_catalog().categories()
        assert "Finance" in categories
        assert len(categories["Finance"]) == 2
