# ============================================================
# draft.py — Create-form Draft
# ============================================================

from typing import Any, Dict, Optional

from incident_console.models import TabSelector
from incident_console.schemas import DRAFT_MODELS, FieldSpec, coerce, field_spec


class Draft:
    """Not-yet-submitted incident, tagged with the tab it belongs to.

    Values are keyed by attribute name and only ever written through
    ``set``, which looks the field up in that tab's schema and coerces the
    value on the spot. A draft never changes tab; switching tabs means
    starting a new one.
    """

    def __init__(self, tab: TabSelector):
        self.tab = TabSelector(tab)
        self._values: Dict[str, Any] = {}

    @classmethod
    def empty(cls, tab: TabSelector) -> "Draft":
        return cls(tab)

    def _spec(self, name: str) -> FieldSpec:
        spec = field_spec(self.tab, name)
        if spec is None:
            raise KeyError(f"{name!r} is not a {self.tab.value} incident field")
        return spec

    def set(self, name: str, value: Any) -> Any:
        spec = self._spec(name)
        coerced = coerce(spec, value)
        self._values[spec.name] = coerced
        return coerced

    def get(self, name: str, default: Optional[Any] = None) -> Any:
        return self._values.get(self._spec(name).name, default)

    @property
    def values(self) -> Dict[str, Any]:
        return dict(self._values)

    def is_empty(self) -> bool:
        return not self._values

    def to_payload(self) -> Dict[str, Any]:
        """Wire body for the create call: only the fields the user set"""
        model = DRAFT_MODELS[self.tab](**self._values)
        return model.model_dump(by_alias=True, exclude_unset=True)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Draft):
            return NotImplemented
        return self.tab == other.tab and self._values == other._values

    def __repr__(self) -> str:
        return f"Draft(tab={self.tab.value!r}, values={self._values!r})"
