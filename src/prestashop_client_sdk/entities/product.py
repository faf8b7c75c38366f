from __future__ import annotations

from typing import Any

from .base import Entity, loose_int

# Localized fields are read from the second entry of the language list.
# This is a fixed slot, not a lookup by language id or iso code.
LOCALIZED_SLOT = 1


class Product(Entity):
    resource = "product"

    def get_id(self) -> int:
        return loose_int(self._attributes.get("id"))

    def get_price(self) -> int:
        return loose_int(self._attributes.get("price"))

    def get_default_image_id(self) -> int:
        return loose_int(self._attributes.get("id_default_image"))

    def get_name(self) -> str:
        return self._localized("name")

    def get_rewrite_link(self) -> str:
        return self._localized("link_rewrite")

    def _localized(self, name: str) -> str:
        entries: Any = self.get_raw(name)
        if not isinstance(entries, list) or len(entries) <= LOCALIZED_SLOT:
            return ""
        entry = entries[LOCALIZED_SLOT]
        if isinstance(entry, dict):
            return str(entry.get("value") or "")
        return str(entry)
