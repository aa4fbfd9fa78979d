"""Settings validators shared by server configuration classes."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from pydantic_settings import EnvSettingsSource

if TYPE_CHECKING:
    from pydantic.fields import FieldInfo


def _require_items(items: list[str], field: str) -> list[str]:
    if not items:
        raise ValueError(f"{field} must contain at least one entry")
    return items


def parse_origin_list(value: str | list[str], *, field: str = "cors_origins") -> list[str]:
    """Parse a list of browser origins from an env string or a config list.

    Accepts a JSON array ('["http://a.com","http://b.com"]') or a
    comma-separated string ('http://a.com,http://b.com'). Entries are
    stripped, trailing slashes removed, and blank entries skipped.
    An empty result is an error.
    """
    if isinstance(value, list):
        raw_items = value
    else:
        stripped = value.strip()
        if stripped.startswith("["):
            try:
                raw_items = json.loads(stripped)
            except json.JSONDecodeError as e:
                raise ValueError(f"{field} is not a valid JSON array: {e}") from e
            if not isinstance(raw_items, list) or not all(isinstance(item, str) for item in raw_items):
                raise ValueError(f"{field} JSON value must be an array of strings")
        else:
            raw_items = stripped.split(",")

    origins = [item.strip().rstrip("/") for item in raw_items]
    return _require_items([o for o in origins if o], field)


ORIGIN_LIST_FIELDS = frozenset({"cors_origins"})


class OriginListEnvSettingsSource(EnvSettingsSource):
    """Env source that leaves origin-list fields as raw strings.

    pydantic-settings JSON-decodes list fields before validators run, which
    rejects the comma-separated form. Raw strings reach parse_origin_list instead.
    """

    def prepare_field_value(
        self,
        field_name: str,
        field: FieldInfo,
        value: Any,  # noqa: ANN401
        value_is_complex: bool,  # noqa: FBT001
    ) -> Any:  # noqa: ANN401
        if field_name in ORIGIN_LIST_FIELDS and isinstance(value, str):
            return value
        return super().prepare_field_value(field_name, field, value, value_is_complex)
