from __future__ import annotations

from typing import Any, ClassVar, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from wxr_converter.extractors.xml_element import WXRElement

BagValue = Union[str, List[str], Dict[str, Any]]


class Entity(BaseModel):
    """
    Base of everything built from a WXR export.

    ``prefix_filter`` is the regular expression removed from element names
    before handler lookup; ``default_bag`` names the dict field receiving
    elements that have neither a handler nor a declared field.
    """

    model_config = ConfigDict(validate_assignment=False, protected_namespaces=())

    prefix_filter: ClassVar[Optional[str]] = None
    default_bag: ClassVar[str] = "fields"

    fields: Dict[str, BagValue] = Field(default_factory=dict)

    def add_to_bag(self, bag: str, key: str, value: BagValue) -> "Entity":
        """Store ``value`` under ``key``; repeated keys collect a list.

        Declared properties win: nothing is stored for a key that names one.
        """
        if key in type(self).model_fields:
            return self
        store = getattr(self, bag)
        existing = store.get(key)
        if existing is None:
            store[key] = value
        elif isinstance(existing, list):
            existing.append(value)
        else:
            store[key] = [existing, value]
        return self

    def add_field(self, fieldname: str, value: BagValue) -> "Entity":
        return self.add_to_bag("fields", fieldname, value)

    def get_field(self, fieldname: str, default: Any = "") -> Any:
        return self.fields.get(fieldname, default)

    def _int_value(self, element: WXRElement, context: Any, default: int = 0) -> int:
        try:
            return int(element.text.strip())
        except ValueError as e:
            if context is not None:
                context.report("INVALID_NUMBER", self, e, element=element.qname, value=element.text)
            return default
