# src/run_lineage/core/graph.py
"""
ProvenanceGraph — visão derivada de nós e arestas de uma Execution.

O grafo não é armazenado separadamente: ele é recalculado a partir da
Execution sempre que solicitado, e é a única estrutura que um
serializador externo (ex.: PROV/ORE) precisa percorrer.

Nós:
    - a Execution (atividade)
    - cada DataObject em `execution.objects` (entidades)

Arestas:
    - wasGeneratedBy: para cada id em `output_ids`
    - used: para cada id em `input_ids`

Invariantes:
    - A ordem das arestas segue a ordem de `input_ids` e `output_ids`
    - Arestas só referenciam ids presentes em `objects`
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from .data_object import DataObject
from .execution import Execution


WAS_GENERATED_BY = "wasGeneratedBy"
USED = "used"


@dataclass(frozen=True)
class ProvenanceEdge:
    """Relação entre a atividade (execução) e uma entidade (artefato)."""

    relation: str
    activity_id: str
    entity_id: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "relation": self.relation,
            "activity_id": self.activity_id,
            "entity_id": self.entity_id,
        }


@dataclass(frozen=True)
class ProvenanceGraph:
    execution: Execution
    objects: Tuple[DataObject, ...] = ()
    edges: Tuple[ProvenanceEdge, ...] = ()

    @classmethod
    def from_execution(cls, execution: Execution) -> "ProvenanceGraph":
        edges: List[ProvenanceEdge] = []
        for entity_id in execution.input_ids:
            if entity_id in execution.objects:
                edges.append(ProvenanceEdge(USED, execution.execution_id, entity_id))
        for entity_id in execution.output_ids:
            if entity_id in execution.objects:
                edges.append(ProvenanceEdge(WAS_GENERATED_BY, execution.execution_id, entity_id))

        return cls(
            execution=execution,
            objects=tuple(execution.objects.values()),
            edges=tuple(edges),
        )

    @property
    def node_ids(self) -> List[str]:
        return [self.execution.execution_id] + [o.identifier for o in self.objects]

    def edges_of(self, relation: str) -> List[ProvenanceEdge]:
        return [e for e in self.edges if e.relation == relation]

    def generated(self) -> List[DataObject]:
        """DataObjects produzidos pela run, na ordem de `output_ids`."""
        by_id = {o.identifier: o for o in self.objects}
        return [by_id[e.entity_id] for e in self.edges_of(WAS_GENERATED_BY)]

    def used(self) -> List[DataObject]:
        by_id = {o.identifier: o for o in self.objects}
        return [by_id[e.entity_id] for e in self.edges_of(USED)]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "execution_id": self.execution.execution_id,
            "data_package_id": self.execution.data_package_id,
            "nodes": self.node_ids,
            "objects": [o.to_dict() for o in self.objects],
            "edges": [e.to_dict() for e in self.edges],
        }
