"""Tests for output formatting and pagination."""

import json

import pytest
from rich.table import Table

from relstore.output import format_response, paginate, records_table, render_cli


class TestPagination:
    """Tests for paginate."""

    def test_first_page(self):
        """Test the first window and its metadata."""
        page, meta = paginate(list(range(10)), limit=3, offset=0)

        assert page == [0, 1, 2]
        assert meta == {
            "total_count": 10,
            "limit": 3,
            "offset": 0,
            "returned": 3,
            "has_more": True,
            "next_offset": 3,
        }

    def test_last_page(self):
        """Test a short final window has no next offset."""
        page, meta = paginate(list(range(10)), limit=3, offset=9)

        assert page == [9]
        assert meta["returned"] == 1
        assert meta["has_more"] is False
        assert meta["next_offset"] is None

    def test_exact_fit(self):
        """Test a window ending on the last item has nothing more."""
        page, meta = paginate(list(range(6)), limit=3, offset=3)

        assert page == [3, 4, 5]
        assert meta["has_more"] is False

    def test_no_limit_returns_everything(self):
        """Test a missing limit returns the rest of the items."""
        page, meta = paginate(list(range(5)), offset=2)

        assert page == [2, 3, 4]
        assert meta["limit"] is None
        assert meta["has_more"] is False

    def test_offset_past_end(self):
        """Test an offset past the end returns an empty window."""
        page, meta = paginate([1, 2], limit=5, offset=10)

        assert page == []
        assert meta["total_count"] == 2
        assert meta["next_offset"] is None

    def test_negative_values_rejected(self):
        """Test negative limits and offsets raise ValueError."""
        with pytest.raises(ValueError):
            paginate([1], limit=-1, offset=0)
        with pytest.raises(ValueError):
            paginate([1], limit=1, offset=-1)


class TestFormatResponse:
    """Tests for format_response and render_cli."""

    def test_json(self):
        """Test JSON responses keep the payload as data."""
        response = format_response({"count": 1}, "json")

        assert response == {"format": "json", "content": {"count": 1}}
        assert json.loads(render_cli(response)) == {"count": 1}

    def test_json_blob_as_hex(self):
        """Test bytes in a payload become hex text."""
        response = format_response({"records": [{"id": 1, "data": b"\x00\xff"}]}, "json")

        assert response["content"] == {"records": [{"id": 1, "data": "00ff"}]}
        assert json.loads(render_cli(response))["records"][0]["data"] == "00ff"

    def test_text_default_renderer(self):
        """Test text without a renderer falls back to indented JSON."""
        response = format_response({"count": 1}, "text")
        assert json.loads(render_cli(response)) == {"count": 1}

    def test_text_custom_renderer(self):
        """Test text with a renderer yields a rich table."""
        response = format_response({"records": [{"id": 1}]}, "TEXT", lambda d: records_table(d["records"]))
        assert isinstance(render_cli(response), Table)

    def test_toon_returns_string(self):
        """Test toon output is a string."""
        response = format_response({"count": 1})

        assert response["format"] == "toon"
        assert isinstance(response["content"], str)
        assert "count" in response["content"]

    def test_toon_with_blob(self):
        """Test toon output accepts bytes cells."""
        response = format_response({"data": b"\x01"})
        assert "01" in response["content"]

    def test_unknown_format(self):
        """Test an unknown format raises ValueError."""
        with pytest.raises(ValueError):
            format_response({}, "xml")


class TestRecordsTable:
    """Tests for records_table."""

    def test_columns_from_first_record(self):
        """Test columns come from the first record."""
        table = records_table([{"id": 1, "name": "John Doe"}, {"id": 2, "name": None}], title="people")

        assert [c.header for c in table.columns] == ["id", "name"]
        assert table.row_count == 2
        assert table.title == "people"

    def test_null_rendered(self):
        """Test NULL cells."""
        table = records_table([{"name": None}])
        assert list(table.columns[0].cells) == ["NULL"]

    def test_blob_rendered_as_literal(self):
        """Test BLOB cells render as SQL hex literals."""
        table = records_table([{"data": b"\xab\x01"}])
        assert list(table.columns[0].cells) == ["x'ab01'"]

    def test_empty(self):
        """Test an empty record list gives an empty table."""
        table = records_table([])
        assert table.row_count == 0
        assert table.columns == []
