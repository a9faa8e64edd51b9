"""
Pluggable per-element hooks invoked while fields are mapped.

A :class:`Transform` is looked up by the qualified element name
(``wp:postmeta``, ``content:encoded``, ``title``) and applied to every
occurrence of that element before the entity's own handler runs.  The
default transform does nothing, so lookups never fail.

Transforms are registered in code through :meth:`TransformRegistry.register`
or in the configuration file::

    {"transforms": {"wp:postmeta": "mysite.transforms:GalleryMeta"}}
"""

from __future__ import annotations

import importlib
from typing import Any, Dict, Iterator, Mapping, Optional, Union

from wxr_converter.extractors.xml_element import WXRElement


class TransformLoadError(ImportError):
    """A configured transform could not be imported or instantiated."""


class Transform:
    """Base hook; subclasses override :meth:`apply`."""

    def apply(self, element: WXRElement, entity: Any) -> None:
        return None


NOOP = Transform()


class MetaTransform(Transform):
    """
    Dispatches ``<wp:postmeta>`` elements to transforms keyed by their
    ``<wp:meta_key>``, e.g. to turn gallery plugin fields into something the
    target site can use.  The dispatched transform receives a detached
    element named after the key whose text is the ``<wp:meta_value>``.
    """

    def __init__(self, handlers: Optional[Mapping[str, Transform]] = None) -> None:
        self._handlers: Dict[str, Transform] = dict(handlers or {})

    def add_handler(self, key: str, transform: Transform) -> "MetaTransform":
        self._handlers[key] = transform
        return self

    def apply(self, element: WXRElement, entity: Any) -> None:
        if element.local_name != "postmeta":
            return
        key = element.findtext("meta_key").strip()
        transform = self._handlers.get(key)
        if transform is not None:
            transform.apply(WXRElement.make(key, element.findtext("meta_value")), entity)


def load_transform(path: str) -> Transform:
    """Instantiate a transform from a ``"package.module:ClassName"`` path."""
    module_name, _, attr = path.partition(":")
    if not module_name or not attr:
        raise TransformLoadError(f"Invalid transform path {path!r}, expected 'module:ClassName'")
    try:
        module = importlib.import_module(module_name)
        factory = getattr(module, attr)
    except (ImportError, AttributeError) as e:
        raise TransformLoadError(f"Cannot import transform {path!r}: {e}") from e
    transform = factory() if isinstance(factory, type) else factory
    if not isinstance(transform, Transform):
        raise TransformLoadError(f"{path!r} is not a Transform")
    return transform


class TransformRegistry:
    def __init__(self, transforms: Optional[Mapping[str, Transform]] = None) -> None:
        self._transforms: Dict[str, Transform] = {}
        for qname, transform in (transforms or {}).items():
            self.register(qname, transform)

    @classmethod
    def from_config(cls, paths: Mapping[str, str]) -> "TransformRegistry":
        return cls({qname: load_transform(path) for qname, path in paths.items()})

    def register(self, qname: str, transform: Union[Transform, str]) -> "TransformRegistry":
        if isinstance(transform, str):
            transform = load_transform(transform)
        if not isinstance(transform, Transform):
            raise TypeError(f"Transform for {qname!r} must be a Transform instance")
        self._transforms[qname] = transform
        return self

    def get(self, qname: str) -> Transform:
        return self._transforms.get(qname, NOOP)

    def __contains__(self, qname: object) -> bool:
        return qname in self._transforms

    def __iter__(self) -> Iterator[str]:
        return iter(self._transforms)

    def __len__(self) -> int:
        return len(self._transforms)
