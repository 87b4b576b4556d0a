"""Settings Schemas — typed view over the single app_config record.

Invariants:
    - AppSettings always carries every module (defaults fill gaps via core.app_settings)
    - AppSettingsPatch fields are all optional; unset fields are not sent to the merge
    - primary_color is a #rgb / #rrggbb hex string

Design Decisions:
    - Validation here, merging in core: the merge works on plain dicts so it stays pure
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from origen.core.app_settings import apply_partial, merge_loaded

_HEX_COLOR = r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ModuleConfig(_CamelModel):
    enabled: bool = True
    label: str = ""
    sub_label: str = ""
    color: str = "blue"


class AppSettings(_CamelModel):
    app_name: str
    app_subtitle: str
    primary_color: str = Field(pattern=_HEX_COLOR)
    logo_url: str | None = ""
    inventory_alert_threshold: int = Field(ge=0)
    enabled_modules: dict[str, ModuleConfig]

    @classmethod
    def from_stored(cls, stored: dict | None) -> "AppSettings":
        """Build from a stored record, filling in defaults for missing fields."""
        return cls.model_validate(merge_loaded(stored))

    def merged_with(self, partial: dict) -> "AppSettings":
        """Return a new AppSettings with `partial` layered over this one."""
        return AppSettings.model_validate(apply_partial(self.model_dump(), partial))


class ModuleConfigPatch(_CamelModel):
    enabled: bool | None = None
    label: str | None = None
    sub_label: str | None = None
    color: str | None = None


class AppSettingsPatch(_CamelModel):
    app_name: str | None = None
    app_subtitle: str | None = None
    primary_color: str | None = Field(None, pattern=_HEX_COLOR)
    logo_url: str | None = None
    inventory_alert_threshold: int | None = Field(None, ge=0)
    enabled_modules: dict[str, ModuleConfigPatch] | None = None

    def to_partial(self) -> dict:
        """Snake-case dict of only the fields the caller set."""
        return self.model_dump(exclude_unset=True, exclude_none=True)
