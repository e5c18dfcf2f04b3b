"""Unit tests for income_range_service."""
import json

import pytest

from src.models.income_range import IncomeRange
from src.services import income_range_service
from src.services.income_range_service import (
    DEFAULT_INCOME_RANGE,
    get_income_range_label,
    get_income_range_values,
    get_income_ranges,
    set_income_ranges_file,
)


@pytest.fixture
def catalog_file(tmp_path, monkeypatch):
    """Point the service at a temporary catalog."""
    file_path = tmp_path / "income_ranges.json"
    file_path.write_text(json.dumps({
        "income_ranges": [
            {"value": "0-50000", "label": "Below ₦50,000"},
            {"value": "50000-100000", "label": "₦50,000 - ₦100,000"},
        ]
    }, ensure_ascii=False), encoding="utf-8")

    monkeypatch.setattr(income_range_service, "INCOME_RANGES_FILE", str(file_path))
    income_range_service._clear_cache()
    yield file_path
    income_range_service._clear_cache()


class TestGetIncomeRanges:
    """Test catalog loading."""

    def test_loads_in_order(self, catalog_file):
        assert get_income_ranges() == [
            IncomeRange("0-50000", "Below ₦50,000"),
            IncomeRange("50000-100000", "₦50,000 - ₦100,000"),
        ]

    def test_values(self, catalog_file):
        assert get_income_range_values() == ["0-50000", "50000-100000"]

    def test_label_lookup(self, catalog_file):
        assert get_income_range_label("50000-100000") == "₦50,000 - ₦100,000"
        assert get_income_range_label("unknown") is None

    def test_results_are_cached(self, catalog_file):
        first = get_income_ranges()
        catalog_file.write_text(json.dumps({"income_ranges": []}), encoding="utf-8")

        assert get_income_ranges() is first

    def test_duplicate_values_rejected(self, catalog_file):
        catalog_file.write_text(json.dumps({
            "income_ranges": [
                {"value": "a", "label": "A"},
                {"value": "a", "label": "Again"},
            ]
        }), encoding="utf-8")

        with pytest.raises(ValueError, match="Duplicate income range value"):
            get_income_ranges()

    def test_missing_file_raises_error(self, tmp_path, monkeypatch):
        monkeypatch.setattr(income_range_service, "INCOME_RANGES_FILE", str(tmp_path / "none.json"))
        income_range_service._clear_cache()

        with pytest.raises(FileNotFoundError):
            get_income_ranges()


class TestSetIncomeRangesFile:
    """Test switching catalog files."""

    def test_switching_file_reloads(self, catalog_file, tmp_path):
        get_income_ranges()
        other = tmp_path / "other.json"
        other.write_text(json.dumps({"income_ranges": [{"value": "x", "label": "X"}]}), encoding="utf-8")

        set_income_ranges_file(str(other))

        assert get_income_range_values() == ["x"]

    def test_same_file_keeps_cache(self, catalog_file):
        first = get_income_ranges()
        set_income_ranges_file(str(catalog_file))

        assert get_income_ranges() is first


class TestBundledCatalog:
    """Test the catalog shipped in data/."""

    def test_default_bracket_is_in_catalog(self, monkeypatch):
        monkeypatch.setattr(income_range_service, "INCOME_RANGES_FILE", "data/income_ranges.json")
        income_range_service._clear_cache()
        try:
            assert DEFAULT_INCOME_RANGE in get_income_range_values()
        finally:
            income_range_service._clear_cache()


class TestIncomeRangeModel:
    """Test IncomeRange validation."""

    def test_empty_value_raises_error(self):
        with pytest.raises(ValueError, match="value cannot be empty"):
            IncomeRange("", "Label")

    def test_empty_label_raises_error(self):
        with pytest.raises(ValueError, match="label cannot be empty"):
            IncomeRange("0-1", " ")
