"""
Test Suite: Presets and Settings
================================
"""

import json

import pytest

from newton_pairs.core.config import CONTACT_CFG, ORBIT_CFG, load_user_settings, save_user_settings
from newton_pairs.core.physics import contact_force
from newton_pairs.data.presets import (
    CONTACT_PRESET_ORDER,
    CONTACT_PRESETS,
    DEFAULT_PRESET_KEY,
    ORBIT_PRESET_ORDER,
    ORBIT_PRESETS,
    preset_for,
)


class TestPresets:
    def test_five_of_each(self):
        assert len(CONTACT_PRESET_ORDER) == 5
        assert len(ORBIT_PRESET_ORDER) == 5

    def test_default_is_textbook(self):
        contact = CONTACT_PRESETS[DEFAULT_PRESET_KEY].params()
        orbit = ORBIT_PRESETS[DEFAULT_PRESET_KEY].params()
        assert (contact.mass, contact.speed) == (CONTACT_CFG.default_mass, CONTACT_CFG.default_speed)
        assert (orbit.primary_mass, orbit.secondary_mass, orbit.separation) == (
            ORBIT_CFG.default_primary_mass,
            ORBIT_CFG.default_secondary_mass,
            ORBIT_CFG.default_separation,
        )

    def test_all_presets_within_ranges(self):
        for preset in CONTACT_PRESETS.values():
            p = preset.params()
            assert (p.mass, p.speed) == (preset.mass, preset.speed)
        for preset in ORBIT_PRESETS.values():
            p = preset.params()
            assert (p.primary_mass, p.secondary_mass, p.separation) == (
                preset.primary_mass,
                preset.secondary_mass,
                preset.separation,
            )

    def test_fast_light_matches_slow_heavy(self):
        fast = CONTACT_PRESETS["fast_light"]
        slow = CONTACT_PRESETS["slow_heavy"]
        assert contact_force(fast.mass, fast.speed) == contact_force(slow.mass, slow.speed)

    def test_preset_for(self):
        assert preset_for("contact", 0).key == CONTACT_PRESET_ORDER[0]
        assert preset_for("gravity", 4).key == ORBIT_PRESET_ORDER[4]
        with pytest.raises(ValueError):
            preset_for("friction", 0)

    def test_unknown_key(self):
        with pytest.raises(KeyError):
            CONTACT_PRESETS["sledgehammer"]


class TestUserSettings:
    def test_round_trip(self, tmp_path):
        path = tmp_path / "nested" / "settings.json"
        save_user_settings({"example": "gravity", "window_size": [1024, 700]}, path)
        assert load_user_settings(path) == {"example": "gravity", "window_size": [1024, 700]}

    def test_missing_file(self, tmp_path):
        assert load_user_settings(tmp_path / "absent.json") == {}

    def test_corrupt_or_non_object(self, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("{not json", encoding="utf-8")
        assert load_user_settings(bad) == {}
        bad.write_text(json.dumps([1, 2]), encoding="utf-8")
        assert load_user_settings(bad) == {}

    def test_unwritable_location_is_ignored(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("", encoding="utf-8")
        save_user_settings({"a": 1}, blocker / "settings.json")
