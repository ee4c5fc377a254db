from dataclasses import dataclass, field
from typing import Dict, List, Set, Tuple

import networkx as nx


@dataclass(frozen=True)
class Section:
    """An atomic schedulable unit: one subject taught by one teacher to one group in one room."""

    id: str
    teacher_id: str
    room_id: str
    group_id: str
    subject_id: str
    name: str = ""

    @classmethod
    def from_dict(cls, data):
        """
        Build a Section from a JSON body or a MongoDB document.
        Mongo documents carry '_id' instead of 'id'; ObjectIds are stored as strings.
        """
        raw_id = data.get('id', data.get('_id'))
        if raw_id is None:
            raise ValueError("Section is missing an 'id'")

        fields = {}
        for key in ('teacher_id', 'room_id', 'group_id', 'subject_id'):
            if data.get(key) is None:
                raise ValueError(f"Section {raw_id} is missing '{key}'")
            fields[key] = str(data[key])

        return cls(id=str(raw_id), name=data.get('name') or "", **fields)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'subject_id': self.subject_id,
            'teacher_id': self.teacher_id,
            'group_id': self.group_id,
            'room_id': self.room_id,
        }


@dataclass
class ConflictGraph:
    """
    Nodes are section ids in input order.
    adj[node] is the set of sections that may not share a slot with node.
    """

    nodes: List[str] = field(default_factory=list)
    adj: Dict[str, Set[str]] = field(default_factory=dict)

    def degree(self, node):
        return len(self.adj[node])

    def neighbors(self, node):
        return self.adj[node]

    def edges(self) -> List[Tuple[str, str]]:
        """Each conflicting pair once, ordered by the position of its nodes in the input."""
        position = {n: i for i, n in enumerate(self.nodes)}
        pairs = []
        for u in self.nodes:
            for v in sorted(self.adj[u], key=position.get):
                if position[u] < position[v]:
                    pairs.append((u, v))
        return pairs

    @property
    def edge_count(self):
        return sum(len(nbrs) for nbrs in self.adj.values()) // 2

    def to_networkx(self):
        G = nx.Graph()
        G.add_nodes_from(self.nodes)
        G.add_edges_from(self.edges())
        return G

    def node_link_data(self, coloring=None):
        G = self.to_networkx()
        if coloring:
            nx.set_node_attributes(G, coloring, 'color')
        return nx.node_link_data(G, edges="links")


@dataclass
class SolveResult:
    coloring: Dict[str, int]
    colors_count: int
    graph: ConflictGraph


@dataclass
class ImproveResult:
    coloring: Dict[str, int]
    colors_count: int


def count_colors(coloring):
    """max color + 1, or 0 for an empty coloring."""
    if not coloring:
        return 0
    return max(coloring.values()) + 1
