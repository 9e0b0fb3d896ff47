# core/components/plugin_loader.py
"""
Plugin loader for mnasim components.
Discovers built-in core.components modules and third-party plugins via entry points.
Supports dynamic registration for manual plugins.
"""
import importlib
import logging
import pkgutil
from importlib.metadata import entry_points
from typing import Any, Dict, Mapping, Optional, Sequence, Type

from core.exceptions import MNASimError, ParameterError, TopologyError
from core.components.base import Component

logger = logging.getLogger(__name__)


class ComponentFactory:
    """
    Factory for creating component instances by type name or SPICE prefix.
    Auto-registers built-in core.components modules and discovers third-party plugins.
    """
    _registry: Dict[str, Type[Component]] = {}
    _prefixes: Dict[str, Type[Component]] = {}
    _loaded: bool = False

    @classmethod
    def load_plugins(cls) -> None:
        """
        Import every module under core.components (to register built-ins),
        then load entry point plugins from the 'mnasim.components' group.
        """
        if cls._loaded:
            return
        cls._loaded = True

        import core.components as _builtin_pkg
        for _, module_name, _ in pkgutil.iter_modules(_builtin_pkg.__path__):
            importlib.import_module(f"core.components.{module_name}")

        for ep in entry_points(group="mnasim.components"):
            try:
                comp_cls = ep.load()
            except Exception as exc:
                logger.warning("Skipping component plugin '%s': %s", ep.name, exc)
                continue
            if isinstance(comp_cls, type) and issubclass(comp_cls, Component):
                cls.register(comp_cls)
            else:
                logger.warning("Entry point '%s' is not a Component subclass; ignored.", ep.name)

    @classmethod
    def register(cls, comp_cls: Type[Component]) -> None:
        """
        Manually register a component class.
        The class must define a unique `type_name`; an optional `prefix` (and
        `aliases`) make it reachable from SPICE element names.
        """
        if not (isinstance(comp_cls, type) and issubclass(comp_cls, Component)):
            raise MNASimError(f"Cannot register non-Component class: {comp_cls}")
        type_name = getattr(comp_cls, "type_name", None)
        if not isinstance(type_name, str) or not type_name:
            raise MNASimError(f"Component class {comp_cls} lacks a valid `type_name` attribute.")
        cls._registry[type_name.lower()] = comp_cls
        prefix = getattr(comp_cls, "prefix", None)
        for p in ((prefix,) if prefix else ()) + tuple(getattr(comp_cls, "aliases", ())):
            cls._prefixes[p.upper()] = comp_cls

    @classmethod
    def get_class(cls, type_name: str) -> Type[Component]:
        cls.load_plugins()
        comp_cls = cls._registry.get(type_name.lower())
        if comp_cls is None:
            raise TopologyError(f"Unknown component type: '{type_name}'")
        return comp_cls

    @classmethod
    def class_for_name(cls, ref: str) -> Optional[Type[Component]]:
        """Longest registered SPICE prefix that *ref* starts with, if any."""
        cls.load_plugins()
        upper = ref.upper()
        for prefix in sorted(cls._prefixes, key=len, reverse=True):
            if upper.startswith(prefix):
                return cls._prefixes[prefix]
        return None

    @classmethod
    def create(cls, type_name: str, comp_id: str, nodes: Sequence[Any],
               params: Optional[Mapping[str, Any]] = None) -> Component:
        """
        Instantiate a component by its type name (case-insensitive).
        Raises ParameterError when the parameters do not fit the class.
        """
        comp_cls = cls.get_class(type_name)
        try:
            return comp_cls(comp_id, nodes, **dict(params or {}))
        except MNASimError:
            raise
        except (TypeError, ValueError) as e:
            raise ParameterError(
                f"Error instantiating component '{comp_id}' of type '{type_name}': {e}"
            ) from e
