from solver.conflict_graph import build_conflict_graph
from solver.models import SolveResult, count_colors

STRATEGIES = ('largest_first', 'dsatur')


def first_fit(used):
    """Smallest non-negative color not in used."""
    color = 0
    while color in used:
        color += 1
    return color


def largest_first_coloring(graph):
    """
    Largest-Degree-First greedy coloring.
    Nodes are visited by degree, highest first. sorted() is stable, so
    sections with equal degree keep their input order.
    """
    order = sorted(graph.nodes, key=lambda n: -graph.degree(n))

    colors = {}
    for node in order:
        used = {colors[nb] for nb in graph.neighbors(node) if nb in colors}
        colors[node] = first_fit(used)

    return colors


def dsatur_coloring(graph):
    """
    DSATUR Algorithm for Graph Coloring.
    Picks the uncolored node with the highest saturation, then highest degree,
    then earliest input position.
    Returns: node -> color_index (0..k)
    """
    colors = {}
    saturation = {n: set() for n in graph.nodes}  # node -> set of neighbor colors
    position = {n: i for i, n in enumerate(graph.nodes)}

    uncolored = set(graph.nodes)

    while uncolored:
        node = min(uncolored, key=lambda n: (-len(saturation[n]), -graph.degree(n), position[n]))

        uncolored.remove(node)
        color = first_fit(saturation[node])
        colors[node] = color

        # Update neighbors
        for neighbor in graph.neighbors(node):
            if neighbor in uncolored:
                saturation[neighbor].add(color)

    return colors


def solve_greedy(sections, strategy='largest_first'):
    """Build the conflict graph for sections and color it. Deterministic for a fixed input order."""
    if strategy not in STRATEGIES:
        raise ValueError(f"Unknown coloring strategy '{strategy}', expected one of {', '.join(STRATEGIES)}")

    graph = build_conflict_graph(sections)

    if strategy == 'dsatur':
        coloring = dsatur_coloring(graph)
    else:
        coloring = largest_first_coloring(graph)

    return SolveResult(coloring=coloring, colors_count=count_colors(coloring), graph=graph)
