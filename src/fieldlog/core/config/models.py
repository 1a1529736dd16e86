"""
Configuration Models

Pydantic models for the user settings that drive export planning: global
flags such as compact file names, and per-export template settings keyed by
option key (``<handler>-<format>-<exportType>``) plus the ``default`` entry.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator


DEFAULT_EXPORT_SETTINGS_KEY = "default"


class ExportSettings(BaseModel):
    """
    Template settings for one export option key.

    Besides the named fields, any additional string entry is treated as an
    override for the base partial of the same name (``RefActivityNameNormal``,
    ``DefaultTitle``...). A ``None`` value means "use the built-in default".
    """

    name_template: Optional[str] = Field(
        default=None,
        alias="nameTemplate",
        description="Template for the export file name"
    )
    title_template: Optional[str] = Field(
        default=None,
        alias="titleTemplate",
        description="Template for the export document title"
    )
    custom_templates: Optional[bool] = Field(
        default=None,
        alias="customTemplates",
        description="False forces the global default templates for this export"
    )
    private_data: Optional[bool] = Field(
        default=None,
        alias="privateData",
        description="Include operation notes and other private data in the export"
    )

    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
    )

    def partial_overrides(self) -> Dict[str, str]:
        """Extra string entries, used to override base partial templates."""
        extras = self.model_extra or {}
        return {key: value for key, value in extras.items() if isinstance(value, str) and value}

    def merged_over(self, fallback: Optional[Dict[str, Any]]) -> 'ExportSettings':
        """Return a copy of these settings layered on top of ``fallback``."""
        data: Dict[str, Any] = {}
        if fallback:
            base = fallback if isinstance(fallback, dict) else fallback.model_dump(by_alias=True, exclude_none=True)
            data.update(ExportSettings.model_validate(base).model_dump(by_alias=True, exclude_none=True))
        data.update(self.model_dump(by_alias=True, exclude_none=True))
        return ExportSettings.model_validate(data)


class AppSettings(BaseModel):
    """
    Root settings model.

    Unknown keys are kept (``extra="allow"``) because handlers read their own
    flags from the same settings object.
    """

    operator_call: str = Field(
        default="",
        alias="operatorCall",
        description="Callsign of the operator using the application"
    )
    use_compact_file_names: bool = Field(
        default=False,
        alias="useCompactFileNames",
        description="Use compact partial variants for file names"
    )
    dev_mode: bool = Field(
        default=False,
        alias="devMode",
        description="Enable developer-only exports"
    )
    exports: Dict[str, ExportSettings] = Field(
        default_factory=dict,
        description="Per-export template settings keyed by option key"
    )

    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
        validate_assignment=True,
    )

    @field_validator('operator_call')
    @classmethod
    def normalize_operator_call(cls, v):
        """Callsigns are stored upper case."""
        return (v or "").strip().upper()

    @field_validator('exports', mode='before')
    @classmethod
    def drop_empty_exports(cls, v):
        """Treat a null exports section like an empty one."""
        if v is None:
            return {}
        return {key: (value or {}) for key, value in v.items()}

    def get(self, name: str, default: Any = None) -> Any:
        """Dictionary-style lookup by field name, alias or extra key."""
        for field_name, info in type(self).model_fields.items():
            if name in (field_name, info.alias):
                return getattr(self, field_name)
        return (self.model_extra or {}).get(name, default)
