"""
Unit tests for WeightUnit conversion and the JSON preference store.
"""
import json

import pytest

from weightgraph import constants
from weightgraph.core.units import WeightUnit
from weightgraph.utils.helpers import format_weight
from weightgraph.utils.preferences import PreferenceStore


@pytest.fixture
def preferences(tmp_path):
    return PreferenceStore(tmp_path / "prefs.json")


def test_conversion_factors():
    assert WeightUnit.KILOGRAM.convert(70.0) == 70.0
    assert WeightUnit.POUND.convert(70.0) == pytest.approx(154.3234)
    assert WeightUnit.POUND.symbol == "lb"


def test_format_weight():
    assert format_weight(154.3234, WeightUnit.POUND) == "154.3 lb"
    assert format_weight(70.0, WeightUnit.KILOGRAM, decimals=2) == "70.00 kg"


def test_unit_defaults_to_kilogram(preferences):
    assert WeightUnit.load(preferences) is WeightUnit.KILOGRAM


def test_unit_round_trips_through_file(tmp_path):
    path = tmp_path / "prefs.json"
    WeightUnit.POUND.save(PreferenceStore(path))
    assert json.loads(path.read_text())[constants.config.defaults.UNIT_PREFERENCE_KEY] == "pound"
    assert WeightUnit.load(PreferenceStore(path)) is WeightUnit.POUND


def test_unknown_unit_falls_back_to_kilogram(preferences, caplog):
    preferences.set(constants.config.defaults.UNIT_PREFERENCE_KEY, "stone")
    with caplog.at_level("WARNING"):
        assert WeightUnit.load(preferences) is WeightUnit.KILOGRAM
    assert "stone" in caplog.text


def test_corrupt_preferences_file_starts_empty(tmp_path):
    path = tmp_path / "prefs.json"
    path.write_text("{not json")
    store = PreferenceStore(path)
    assert store.get("anything", "fallback") == "fallback"


def test_non_object_preferences_file_is_ignored(tmp_path):
    path = tmp_path / "prefs.json"
    path.write_text("[1, 2, 3]")
    assert PreferenceStore(path).get("anything") is None


def test_set_skips_unchanged_value(preferences, mocker):
    preferences.set("key", "value")
    mock_move = mocker.patch("shutil.move")
    preferences.set("key", "value")
    mock_move.assert_not_called()
