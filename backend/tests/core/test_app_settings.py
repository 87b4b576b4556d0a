"""App Settings Merge — defaults, loaded records, and partial edits.

Invariants:
    - Every default module survives any merge
    - Module edits merge per field
    - Inputs are never mutated
"""

from origen.core.app_settings import (
    DEFAULT_MODULES, DEFAULT_SETTINGS, apply_partial, default_settings, merge_loaded,
)


def test_default_settings_is_a_copy():
    s = default_settings()
    s["enabled_modules"]["loans"]["enabled"] = False
    assert DEFAULT_SETTINGS["enabled_modules"]["loans"]["enabled"] is True


def test_merge_loaded_none_gives_defaults():
    assert merge_loaded(None) == DEFAULT_SETTINGS


def test_merge_loaded_fills_missing_modules():
    loaded = {"app_name": "Otra", "enabled_modules": {"loans": {"enabled": False}}}
    merged = merge_loaded(loaded)
    assert merged["app_name"] == "Otra"
    assert set(merged["enabled_modules"]) == set(DEFAULT_MODULES)
    assert merged["enabled_modules"]["loans"]["enabled"] is False
    assert merged["enabled_modules"]["loans"]["label"] == DEFAULT_MODULES["loans"]["label"]


def test_apply_partial_keeps_unrelated_fields():
    current = default_settings()
    merged = apply_partial(current, {"primary_color": "#000000"})
    assert merged["primary_color"] == "#000000"
    assert merged["app_name"] == current["app_name"]


def test_apply_partial_merges_module_per_field():
    current = default_settings()
    merged = apply_partial(current, {"enabled_modules": {"events": {"label": "Agenda"}}})
    assert merged["enabled_modules"]["events"] == {**DEFAULT_MODULES["events"], "label": "Agenda"}


def test_apply_partial_does_not_mutate_inputs():
    current = default_settings()
    partial = {"enabled_modules": {"events": {"enabled": False}}}
    apply_partial(current, partial)
    assert current == DEFAULT_SETTINGS
    assert partial == {"enabled_modules": {"events": {"enabled": False}}}
