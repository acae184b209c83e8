"""Namespace assembler: attaches compiled bindings under their dotted names.

``compile.solidity`` becomes a nested ``compile`` namespace holding a
``solidity`` method. Properties are exposed as read-only attributes plus
a ``get_<name>_async(callback)`` method.
"""

from __future__ import annotations

from typing import Any, Iterable

from ..config import ClientConfig
from .descriptors import MethodDescriptor, PropertyDescriptor
from .method import MethodBinding, compile_method
from .property import PropertyBinding, compile_property
from .request_manager import RequestManager

ASYNC_GETTER_PREFIX = "get_"
ASYNC_GETTER_SUFFIX = "_async"


class Namespace:
    """A user-facing object graph of bound methods and properties."""

    def __init__(self, name: str) -> None:
        object.__setattr__(self, "_name", name)
        object.__setattr__(self, "_methods", {})
        object.__setattr__(self, "_properties", {})

    def __getattr__(self, attr: str) -> Any:
        # Only reached when normal lookup fails.
        properties = self.__dict__.get("_properties", {})
        if attr in properties:
            return properties[attr].get()
        if attr.startswith(ASYNC_GETTER_PREFIX) and attr.endswith(ASYNC_GETTER_SUFFIX):
            prop = properties.get(attr[len(ASYNC_GETTER_PREFIX):-len(ASYNC_GETTER_SUFFIX)])
            if prop is not None:
                return prop.get_async
        raise AttributeError(f"Namespace {self.__dict__.get('_name')!r} has no attribute {attr!r}")

    def __setattr__(self, attr: str, value: Any) -> None:
        if attr in self._properties:
            raise AttributeError(f"Property '{attr}' is read-only")
        object.__setattr__(self, attr, value)

    def __dir__(self) -> list[str]:
        names = set(super().__dir__())
        names.update(self._properties)
        names.update(
            f"{ASYNC_GETTER_PREFIX}{name}{ASYNC_GETTER_SUFFIX}" for name in self._properties
        )
        return sorted(names)

    def __repr__(self) -> str:
        return f"<Namespace {self._name}>"

    def _child(self, name: str) -> Namespace:
        child = self.__dict__.get(name)
        if child is None:
            child = Namespace(f"{self._name}.{name}")
            object.__setattr__(self, name, child)
        elif not isinstance(child, Namespace):
            raise ValueError(f"'{name}' is already bound in '{self._name}'")
        return child

    def attach_method(self, binding: MethodBinding) -> None:
        *parents, leaf = binding.name.split(".")
        target = self
        for part in parents:
            target = target._child(part)
        if leaf in target.__dict__ or leaf in target._properties:
            raise ValueError(f"Duplicate binding '{binding.name}'")
        object.__setattr__(target, leaf, binding)
        self._methods[binding.name] = binding

    def attach_property(self, binding: PropertyBinding) -> None:
        if binding.name in self.__dict__ or binding.name in self._properties:
            raise ValueError(f"Duplicate binding '{binding.name}'")
        self._properties[binding.name] = binding

    def method_binding(self, name: str) -> MethodBinding:
        """Look up a method binding by its dotted name."""
        return self._methods[name]

    def property_binding(self, name: str) -> PropertyBinding:
        """Look up a property binding by name (without reading it)."""
        return self._properties[name]

    def method_names(self) -> list[str]:
        return list(self._methods)

    def property_names(self) -> list[str]:
        return list(self._properties)


def assemble_namespace(
    name: str,
    methods: Iterable[MethodDescriptor],
    properties: Iterable[PropertyDescriptor],
    manager: RequestManager,
    config: ClientConfig,
    namespace_cls: type[Namespace] = Namespace,
    namespace_kwargs: dict[str, Any] | None = None,
) -> Namespace:
    """Compile every descriptor and attach it to a fresh namespace.

    Raises:
        ValueError: If two descriptors share a name.
    """
    namespace = namespace_cls(name, **(namespace_kwargs or {}))
    for descriptor in methods:
        namespace.attach_method(compile_method(descriptor, manager, config))
    for descriptor in properties:
        namespace.attach_property(compile_property(descriptor, manager))
    return namespace
