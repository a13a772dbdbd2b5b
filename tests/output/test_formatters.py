"""Tests for output formatting and Rich renderers."""

from __future__ import annotations

import json

from roperty.output.formatters import OutputSettings, format_result
from roperty.output.renderers import display_value, render_quiet, render_result
from roperty.services.result import ServiceResult

GET_RESULT = ServiceResult(
    ok=True,
    op="get",
    data={
        "key": "greeting",
        "value": "Hallo",
        "matched": ["shop", "*", "de_DE"],
        "source": "override",
    },
)


class TestFormatResult:
    def test_json(self) -> None:
        output = format_result(GET_RESULT, settings=OutputSettings(json_output=True))
        assert json.loads(output)["data"]["value"] == "Hallo"

    def test_quiet_prints_bare_value(self) -> None:
        assert format_result(GET_RESULT, settings=OutputSettings(quiet=True)) == "Hallo"

    def test_json_beats_quiet(self) -> None:
        settings = OutputSettings(json_output=True, quiet=True)
        assert json.loads(format_result(GET_RESULT, settings=settings))["ok"] is True

    def test_default_is_rich(self) -> None:
        output = format_result(GET_RESULT)
        assert output.startswith("OK")
        assert "value: Hallo" in output


class TestRenderers:
    def test_get_verbose_shows_match(self) -> None:
        output = render_result(GET_RESULT, verbose=True)
        assert "source: override" in output
        assert "shop|*|de_DE" in output

    def test_error(self) -> None:
        result = ServiceResult.failure("get", "NOT_FOUND", "No property named 'x'")
        output = render_result(result)
        assert output.startswith("ERROR")
        assert "[NOT_FOUND]" in output
        assert "No property named 'x'" in output

    def test_list_table(self) -> None:
        result = ServiceResult(
            ok=True,
            op="list",
            data={
                "count": 1,
                "items": [
                    {
                        "key": "limit",
                        "default": 10,
                        "type": "integer",
                        "overrides": 2,
                        "description": None,
                    }
                ],
            },
        )
        output = render_result(result)
        assert "limit" in output
        assert "integer" in output
        assert "1 properties" in output

    def test_show_panel(self) -> None:
        result = ServiceResult(
            ok=True,
            op="show",
            data={
                "key": "greeting",
                "domains": ["container", "country"],
                "default": "Hello",
                "description": "Landing page",
                "type": "string",
                "overrides": [{"domains": ["shop", "DE"], "value": "Hallo"}],
            },
        )
        output = render_result(result)
        assert "greeting" in output
        assert "description: Landing page" in output
        assert "Hallo" in output

    def test_generic_fallback(self) -> None:
        result = ServiceResult(ok=True, op="custom", data={"n": 1})
        assert "n: 1" in render_result(result)

    def test_quiet_list_prints_keys(self) -> None:
        result = ServiceResult(ok=True, op="list", data={"items": [{"key": "a"}, {"key": "b"}]})
        assert render_quiet(result) == "a\nb"

    def test_quiet_error(self) -> None:
        result = ServiceResult.failure("show", "NOT_FOUND", "missing")
        assert render_quiet(result) == "ERROR: show: missing"


class TestDisplayValue:
    def test_values(self) -> None:
        assert display_value(None) == ""
        assert display_value(True) == "true"
        assert display_value(["a", 1]) == '["a",1]'
        assert display_value(2.5) == "2.5"
