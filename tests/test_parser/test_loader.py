"""Tests for specrun.parser.loader."""

from __future__ import annotations

import io
import json
import textwrap
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest

from specrun.exceptions import SpecParseError
from specrun.parser.loader import (
    _parse_content,
    is_swagger2,
    load_spec,
    validate_spec_version,
)

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"


# ---------------------------------------------------------------------------
# load_spec dispatch
# ---------------------------------------------------------------------------


class TestLoadSpec:
    """Test load_spec dispatches on the source."""

    def test_loads_yaml_file(self) -> None:
        result = load_spec(str(FIXTURES_DIR / "products.yaml"))
        assert result["openapi"] == "3.0.3"
        assert result["info"]["title"] == "Product Catalog API"

    def test_loads_json_file(self, tmp_path: Path) -> None:
        spec_file = tmp_path / "openapi.json"
        spec_file.write_text(json.dumps({"openapi": "3.1.0", "paths": {}}))
        assert load_spec(str(spec_file)) == {"openapi": "3.1.0", "paths": {}}

    def test_loads_yaml_without_extension(self, tmp_path: Path) -> None:
        spec_file = tmp_path / "openapi"
        spec_file.write_text(
            textwrap.dedent("""\
                openapi: "3.0.0"
                info:
                  title: No extension
            """)
        )
        assert load_spec(str(spec_file))["info"]["title"] == "No extension"

    def test_loads_from_stdin(self) -> None:
        spec_json = json.dumps({"openapi": "3.0.3", "info": {"title": "stdin test"}})
        with patch("specrun.parser.loader.sys") as mock_sys:
            mock_sys.stdin = io.StringIO(spec_json)
            result = load_spec("-")
        assert result["info"]["title"] == "stdin test"

    def test_empty_stdin_raises(self) -> None:
        with patch("specrun.parser.loader.sys") as mock_sys:
            mock_sys.stdin = io.StringIO("  \n")
            with pytest.raises(SpecParseError, match="no input received"):
                load_spec("-")

    def test_loads_from_url(self) -> None:
        spec = {"openapi": "3.0.3", "info": {"title": "URL test"}}
        mock_response = httpx.Response(
            status_code=200,
            json=spec,
            request=httpx.Request("GET", "https://example.com/openapi.json"),
        )
        with patch("specrun.parser.loader.httpx.get", return_value=mock_response):
            result = load_spec("https://example.com/openapi.json")
        assert result["info"]["title"] == "URL test"

    def test_url_http_error_raises(self) -> None:
        mock_response = httpx.Response(
            status_code=404,
            request=httpx.Request("GET", "https://example.com/missing.yaml"),
        )
        with patch("specrun.parser.loader.httpx.get", return_value=mock_response):
            with pytest.raises(SpecParseError, match="HTTP 404"):
                load_spec("https://example.com/missing.yaml")

    def test_url_connection_error_raises(self) -> None:
        with patch(
            "specrun.parser.loader.httpx.get",
            side_effect=httpx.ConnectError("connection refused"),
        ):
            with pytest.raises(SpecParseError, match="connection refused"):
                load_spec("https://example.com/openapi.json")

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(SpecParseError, match="spec file not found"):
            load_spec(str(tmp_path / "nope.yaml"))

    def test_empty_file_raises(self, tmp_path: Path) -> None:
        spec_file = tmp_path / "empty.yaml"
        spec_file.write_text("\n")
        with pytest.raises(SpecParseError, match="spec file is empty"):
            load_spec(str(spec_file))


# ---------------------------------------------------------------------------
# _parse_content
# ---------------------------------------------------------------------------


class TestParseContent:
    """Test JSON/YAML detection."""

    def test_json_without_hint(self) -> None:
        assert _parse_content('{"openapi": "3.0.0"}') == {"openapi": "3.0.0"}

    def test_yaml_without_hint(self) -> None:
        assert _parse_content("openapi: 3.0.0\n") == {"openapi": "3.0.0"}

    def test_json_hint_does_not_fall_back(self) -> None:
        with pytest.raises(SpecParseError, match="invalid JSON"):
            _parse_content("openapi: 3.0.0\n", hint="json")

    def test_neither_format_raises(self) -> None:
        with pytest.raises(SpecParseError, match="could not parse spec as JSON or YAML"):
            _parse_content("{not: [valid")

    def test_scalar_document_raises(self) -> None:
        with pytest.raises(SpecParseError, match="got str"):
            _parse_content("just some text")

    def test_list_document_raises(self) -> None:
        with pytest.raises(SpecParseError, match="got list"):
            _parse_content("[1, 2]")


# ---------------------------------------------------------------------------
# validate_spec_version
# ---------------------------------------------------------------------------


class TestValidateSpecVersion:
    """Test which document versions are accepted."""

    @pytest.mark.parametrize("version", ["3.0.0", "3.0.3", "3.1.0"])
    def test_accepts_openapi_3(self, version: str) -> None:
        assert validate_spec_version({"openapi": version}) == version

    def test_accepts_swagger_2(self) -> None:
        version = validate_spec_version({"swagger": "2.0"})
        assert version == "2.0"
        assert is_swagger2(version)

    def test_openapi_3_is_not_swagger(self) -> None:
        assert not is_swagger2("3.0.3")

    def test_rejects_swagger_1(self) -> None:
        with pytest.raises(SpecParseError, match="unsupported Swagger version 1.2"):
            validate_spec_version({"swagger": "1.2"})

    def test_rejects_openapi_4(self) -> None:
        with pytest.raises(SpecParseError, match="unsupported OpenAPI version 4.0.0"):
            validate_spec_version({"openapi": "4.0.0"})

    def test_missing_version_raises(self) -> None:
        with pytest.raises(SpecParseError, match="missing 'openapi' field"):
            validate_spec_version({"info": {}})
