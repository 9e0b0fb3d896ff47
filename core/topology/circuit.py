# core/topology/circuit.py
import logging
from typing import Dict, Iterator, List, Optional

from core.components.base import Component, ElementKind
from core.exceptions import OutOfRangeError, TopologyError

logger = logging.getLogger(__name__)


class Circuit:
    """
    Ordered collection of uniquely named circuit elements plus the label of
    the reference (ground) node.

    ``revision`` increases on every structural change so solvers know when
    their node mapping is stale.
    """
    def __init__(self, ground: str = "0", title: str = ""):
        self.ground = str(ground)
        self.title = title
        self._elements: Dict[str, Component] = {}
        self.revision = 0

    def add_component(self, comp: Component) -> Component:
        if comp.id in self._elements:
            raise TopologyError(f"Duplicate component '{comp.id}'.")
        self._elements[comp.id] = comp
        self.revision += 1
        logger.debug("Added %r", comp)
        return comp

    def remove_component(self, comp_id: str) -> Component:
        comp = self._find_component(comp_id)
        del self._elements[comp_id]
        self.revision += 1
        logger.debug("Removed %r", comp)
        return comp

    def _find_component(self, comp_id: str) -> Component:
        comp = self._elements.get(comp_id)
        if comp is None:
            raise OutOfRangeError(f"Component '{comp_id}' not found.")
        return comp

    def __getitem__(self, comp_id: str) -> Component:
        return self._find_component(comp_id)

    def get(self, comp_id: str) -> Optional[Component]:
        return self._elements.get(comp_id)

    def __contains__(self, comp_id) -> bool:
        return comp_id in self._elements

    def __iter__(self) -> Iterator[Component]:
        return iter(list(self._elements.values()))

    def __len__(self) -> int:
        return len(self._elements)

    @property
    def components(self) -> List[Component]:
        return list(self._elements.values())

    def components_of_kind(self, kind: ElementKind) -> List[Component]:
        return [c for c in self._elements.values() if c.kind is kind]

    def nodes(self) -> List[str]:
        """Every node label, ground included, in order of first appearance."""
        seen: Dict[str, None] = {}
        for comp in self._elements.values():
            for node in comp.nodes:
                seen.setdefault(node, None)
        return list(seen)

    def validate(self, verbose: bool = True) -> None:
        from core.validation import validate_circuit_structure
        validate_circuit_structure(self)
        if verbose:
            logger.info("Circuit validation passed with no errors.")

    def __repr__(self) -> str:
        return f"<Circuit '{self.title}' elements={len(self)} ground='{self.ground}'>"
