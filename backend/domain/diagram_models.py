"""
Domain models for infrastructure diagrams.
Defines the nodes and diagram structure consumed by cost estimation.
"""
from typing import Any, Dict, Mapping, Tuple, Union
from dataclasses import dataclass, field
from types import MappingProxyType


class DiagramValidationError(ValueError):
    """Raised when a diagram does not have the expected structure."""
    pass


class NodeDataError(ValueError):
    """Raised when a single node carries malformed data."""
    pass


@dataclass(frozen=True)
class InfrastructureNode:
    """One infrastructure resource placed on a diagram."""
    id: str
    type: str
    data: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def name(self) -> str:
        """Display name of the node, falling back to its id."""
        name = self.data.get("name")
        if name:
            return str(name)
        return self.id or "unknown"

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "InfrastructureNode":
        """
        Build a node from the diagram editor's JSON shape.

        Args:
            raw: Node mapping with 'id', 'type' and optional 'data'

        Returns:
            Frozen InfrastructureNode with a read-only copy of 'data'

        Raises:
            NodeDataError: If the node is not a mapping or its fields have the wrong types
        """
        if not isinstance(raw, Mapping):
            raise NodeDataError(f"Node must be an object, got {type(raw).__name__}")

        node_type = raw.get("type")
        if not isinstance(node_type, str) or not node_type:
            raise NodeDataError(f"Node {raw.get('id')!r} has no valid 'type'")

        node_id = raw.get("id")
        if node_id is None:
            node_id = ""
        elif not isinstance(node_id, (str, int)):
            raise NodeDataError(f"Node id must be a string, got {type(node_id).__name__}")

        data = raw.get("data")
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise NodeDataError(f"Node {node_id!r} has non-object 'data'")

        return cls(id=str(node_id), type=node_type, data=MappingProxyType(dict(data)))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "type": self.type,
            "data": dict(self.data),
        }


@dataclass(frozen=True)
class DiagramData:
    """
    A diagram as saved by the editor.

    Nodes are kept as given (parsed nodes or raw mappings) so a single
    malformed node can be skipped without rejecting the whole diagram.
    Edges only matter for Terraform generation and are carried opaquely.
    """
    nodes: Tuple[Union[InfrastructureNode, Mapping[str, Any]], ...] = ()
    edges: Tuple[Any, ...] = ()

    @classmethod
    def from_dict(cls, raw: Any) -> "DiagramData":
        """
        Validate the structure of a diagram payload.

        A missing 'nodes' key is treated as an empty diagram; anything that is
        not a list is rejected.

        Args:
            raw: Diagram mapping with 'nodes' and 'edges'

        Returns:
            DiagramData

        Raises:
            DiagramValidationError: If the diagram or its node list has the wrong shape
        """
        if raw is None:
            raise DiagramValidationError("Diagram data is required")
        if isinstance(raw, DiagramData):
            return raw
        if not isinstance(raw, Mapping):
            raise DiagramValidationError(
                f"Diagram data must be an object, got {type(raw).__name__}"
            )

        nodes = raw.get("nodes")
        if nodes is None:
            nodes = []
        if not isinstance(nodes, (list, tuple)):
            raise DiagramValidationError(
                f"Diagram 'nodes' must be a list, got {type(nodes).__name__}"
            )

        edges = raw.get("edges")
        if edges is None:
            edges = []
        if not isinstance(edges, (list, tuple)):
            raise DiagramValidationError(
                f"Diagram 'edges' must be a list, got {type(edges).__name__}"
            )

        return cls(nodes=tuple(nodes), edges=tuple(edges))
