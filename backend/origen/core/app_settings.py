"""App Settings Merge — defaults and partial-edit merging for the single settings record.

Invariants:
    - Every module key in DEFAULT_SETTINGS["enabled_modules"] is present after any merge
    - A partial edit never drops fields: it is layered over the full current value
    - Module configs merge per field (editing a label keeps the enabled flag)
    - Inputs are never mutated; every function returns a fresh dict

Design Decisions:
    - Plain dicts in core, pydantic AppSettings at the boundary (ADR: core has no schema imports)
    - Stored records written by older releases lack newer modules: merge_loaded fills them in
"""

import copy

DEFAULT_MODULES: dict[str, dict] = {
    "inventory": {"enabled": True, "label": "Inventario", "sub_label": "Catálogo", "color": "blue"},
    "movements": {"enabled": True, "label": "Movimientos", "sub_label": "Historial", "color": "indigo"},
    "search": {"enabled": True, "label": "Buscar / Análisis", "sub_label": "Consultas", "color": "violet"},
    "events": {"enabled": True, "label": "Eventos", "sub_label": "Gestión QR", "color": "pink"},
    "baptisms": {"enabled": True, "label": "Bautismos", "sub_label": "Registro", "color": "cyan"},
    "presentations": {"enabled": True, "label": "Niños", "sub_label": "Presentación", "color": "amber"},
    "loans": {"enabled": True, "label": "Préstamos", "sub_label": "Remeras y Buzos", "color": "orange"},
}

DEFAULT_SETTINGS: dict = {
    "app_name": "Origen Iglesia",
    "app_subtitle": "Punto de Información",
    "primary_color": "#2563eb",
    "logo_url": "",
    "inventory_alert_threshold": 5,
    "enabled_modules": DEFAULT_MODULES,
}


def default_settings() -> dict:
    return copy.deepcopy(DEFAULT_SETTINGS)


def merge_loaded(loaded: dict | None) -> dict:
    """Layer a stored record over the defaults (modules merged per field)."""
    merged = default_settings()
    if not loaded:
        return merged
    rest = {k: v for k, v in loaded.items() if k != "enabled_modules"}
    return apply_partial(
        merged, {**rest, "enabled_modules": loaded.get("enabled_modules") or {}},
    )


def apply_partial(current: dict, partial: dict) -> dict:
    """Merge a partial edit into the full current settings."""
    merged = copy.deepcopy(current)
    for key, value in partial.items():
        if key != "enabled_modules":
            merged[key] = copy.deepcopy(value)
            continue
        modules = merged.setdefault("enabled_modules", {})
        for module, fields in (value or {}).items():
            modules[module] = {**modules.get(module, {}), **copy.deepcopy(fields)}
    return merged
