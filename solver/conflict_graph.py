from solver.models import ConflictGraph


def sections_conflict(s1, s2):
    """Two sections cannot run in the same slot if they share a teacher, a room or a group."""
    return (
        s1.teacher_id == s2.teacher_id
        or s1.room_id == s2.room_id
        or s1.group_id == s2.group_id
    )


def build_conflict_graph(sections):
    """
    Builds a conflict graph where nodes are section ids and edges represent conflicts.
    Node: section id (kept in input order)
    Edge if:
      - same teacher
      - same room
      - same student group
    """
    nodes = []
    adj = {}
    for s in sections:
        if s.id in adj:
            raise ValueError(f"Duplicate section id: {s.id}")
        nodes.append(s.id)
        adj[s.id] = set()

    n = len(sections)
    for i in range(n):
        for j in range(i + 1, n):
            s1, s2 = sections[i], sections[j]
            if sections_conflict(s1, s2):
                adj[s1.id].add(s2.id)
                adj[s2.id].add(s1.id)

    return ConflictGraph(nodes=nodes, adj=adj)
