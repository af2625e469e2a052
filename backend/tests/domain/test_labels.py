"""Tests for enum display labels used in assignment emails."""

import pytest

from maintenix.domain.labels import (
    CATEGORY_LABELS,
    EMPTY_LABEL,
    format_category,
    format_priority,
    format_shift,
    lookup_label,
)
from maintenix.schemas.maintenance import RecordCategory

pytestmark = pytest.mark.unit


def test_known_values_map_to_labels():
    assert format_priority("HIGH") == "High"
    assert format_shift("SECOND") == "Second"
    assert format_category("REFRIGERATION") == "Refrigeration"


def test_every_category_has_a_label():
    assert set(CATEGORY_LABELS) == {category.value for category in RecordCategory}


def test_lookup_is_case_insensitive():
    assert format_priority("medium") == "Medium"


def test_unknown_value_is_humanized():
    assert format_category("PREVENTIVE_CHECK") == "Preventive check"
    assert lookup_label("NIGHT_SHIFT", {}) == "Night shift"


@pytest.mark.parametrize("value", [None, ""])
def test_missing_value_renders_placeholder(value):
    assert format_shift(value) == EMPTY_LABEL
