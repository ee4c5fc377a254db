import random
from collections import Counter

from solver.models import ImproveResult

DEFAULT_ITERATIONS = 200


class ColoringContractError(ValueError):
    """The coloring handed to the improver does not match its graph or is not a valid coloring."""


def validate_coloring(coloring, graph):
    """Return every edge (u, v) whose endpoints share a color. Empty list means valid."""
    return [(u, v) for u, v in graph.edges() if coloring.get(u) == coloring.get(v)]


def check_coloring(coloring, graph):
    missing = [n for n in graph.nodes if n not in coloring]
    if missing:
        raise ColoringContractError(f"Coloring is missing {len(missing)} node(s): {missing[:5]}")

    unknown = [n for n in coloring if n not in graph.adj]
    if unknown:
        raise ColoringContractError(f"Coloring has {len(unknown)} node(s) not in the graph: {unknown[:5]}")

    negative = [n for n, c in coloring.items() if c < 0]
    if negative:
        raise ColoringContractError(f"Negative colors assigned to: {negative[:5]}")

    clashes = validate_coloring(coloring, graph)
    if clashes:
        raise ColoringContractError(f"Coloring is not valid, {len(clashes)} conflicting pair(s): {clashes[:5]}")


def improve_coloring(coloring, graph, iterations=DEFAULT_ITERATIONS, rng=None):
    """
    Randomized recolor-to-minimum local search.

    Each iteration picks one node uniformly at random and moves it to the lowest
    color below its current one that none of its neighbors hold. A node is
    never moved up, so the coloring stays valid and colors_count never grows.

    rng is a random.Random; pass a seeded one to reproduce a run.
    """
    if iterations < 0:
        raise ValueError(f"iterations must be >= 0, got {iterations}")
    check_coloring(coloring, graph)

    best = dict(coloring)
    if not best:
        return ImproveResult(coloring=best, colors_count=0)

    rng = rng or random.Random()
    nodes = list(best)
    usage = Counter(best.values())
    best_max = max(usage)

    for _ in range(iterations):
        node = rng.choice(nodes)
        current = best[node]
        forbidden = {best[nb] for nb in graph.neighbors(node)}

        for c in range(current):
            if c not in forbidden:
                best[node] = c
                usage[current] -= 1
                usage[c] += 1
                while best_max > 0 and usage[best_max] == 0:
                    best_max -= 1
                break

    return ImproveResult(coloring=best, colors_count=best_max + 1)
