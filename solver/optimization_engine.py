import logging
import os
import random
import traceback
from datetime import datetime

from solver.greedy import solve_greedy
from solver.improver import improve_coloring, validate_coloring
from solver.timetable import grid_to_json, place_sections

logger = logging.getLogger(__name__)

# Improvement iterations per preset. 'generate' is the fast greedy-only pass.
MODES = {
    'generate': 0,
    'optimize': int(os.getenv('IMPROVE_ITERATIONS', '600')),
}


def iterations_for(mode):
    if mode not in MODES:
        raise ValueError(f"Unknown solve mode '{mode}', expected one of {', '.join(MODES)}")
    return MODES[mode]


class SolvePipeline:
    def __init__(self, store, owner_id, mode='generate', seed=None, iterations=None):
        self.store = store
        self.owner_id = owner_id
        self.mode = mode
        self.iterations = iterations_for(mode) if iterations is None else iterations
        self.rng = random.Random(seed)
        self.logs = []
        self.result = None

    def log(self, message):
        """Keep the line for the stored run and return it for streaming."""
        entry = f"[{datetime.now().strftime('%H:%M:%S')}] {message}"
        self.logs.append(entry)
        return f"{entry}\n"

    def run(self):
        """
        Main Pipeline:
        1. Load Sections
        2. Conflict Graph Construction
        3. Greedy Coloring (Largest Degree First)
        4. Local Search Improvement (optimize only)
        5. Slot Placement & Save
        """
        yield "STATUS:INITIALIZING\n"
        yield self.log(f"Starting '{self.mode}' solve for owner {self.owner_id}...")

        try:
            # --- Phase 1: Load ---
            yield "PROGRESS:10\n"
            yield "STATUS:LOADING SECTIONS\n"
            sections = self.store.load_sections(self.owner_id)
            yield self.log(f"Phase 1: Loaded {len(sections)} sections")

            if not sections:
                yield self.log("Nothing to schedule.")
                yield "STATUS:EMPTY\n"
                yield "DONE\n"
                return

            # --- Phase 2 & 3: Graph + Greedy ---
            yield "PROGRESS:30\n"
            yield "STATUS:BUILDING GRAPH\n"
            result = solve_greedy(sections)
            yield self.log(
                f"Phase 2: Conflict graph has {len(result.graph.nodes)} nodes "
                f"and {result.graph.edge_count} edges"
            )
            yield self.log(f"Phase 3: Greedy coloring uses {result.colors_count} slots")

            # --- Phase 4: Improvement ---
            if self.iterations > 0:
                yield "PROGRESS:60\n"
                yield "STATUS:IMPROVING\n"
                yield self.log(f"Phase 4: Running {self.iterations} improvement iterations...")
                improved = improve_coloring(result.coloring, result.graph, self.iterations, rng=self.rng)
                yield self.log(f"  > Slots: {result.colors_count} -> {improved.colors_count}")
                result.coloring = improved.coloring
                result.colors_count = improved.colors_count

            clashes = validate_coloring(result.coloring, result.graph)
            if clashes:
                raise RuntimeError(f"Solver produced {len(clashes)} clashing pairs")

            # --- Phase 5: Placement & Save ---
            yield "PROGRESS:90\n"
            yield "STATUS:FINALIZING\n"
            grid, warnings = place_sections(sections, result.coloring, result.colors_count)
            for w in warnings:
                yield self.log(f"  > WARNING: {w}")

            self.store.save_solution(self.owner_id, self.mode, result, grid_to_json(grid))
            self.result = result

            yield self.log("Solve Completed Successfully!")
            yield "PROGRESS:100\n"
            yield "STATUS:COMPLETED\n"
            yield "DONE\n"

        except Exception as e:
            logger.exception("Solve pipeline failed for owner %s", self.owner_id)
            yield self.log(f"FATAL PIPELINE ERROR: {str(e)}")
            yield self.log(traceback.format_exc().replace('\n', '<br>'))
            yield "STATUS:FAILED\n"
            # Ensure we don't hang the UI
            yield "DONE\n"


def run_solve_pipeline(store, owner_id, mode='generate', seed=None):
    pipeline = SolvePipeline(store, owner_id, mode=mode, seed=seed)
    return pipeline.run()
