import logging
import os
import random

from flask import Flask, request, jsonify, Response, stream_with_context
from pymongo import MongoClient

from solver.greedy import solve_greedy
from solver.improver import improve_coloring, check_coloring, ColoringContractError
from solver.models import Section
from solver.optimization_engine import iterations_for, run_solve_pipeline
from solver.store import SectionStore
from solver.timetable import grid_to_json, place_sections

logging.basicConfig(level=os.getenv('LOG_LEVEL', 'INFO'))
logger = logging.getLogger(__name__)

app = Flask(__name__)

# MongoDB Connection (lazy: no server round trip until the first query)
MONGO_URI = os.getenv('MONGO_URI', 'mongodb://localhost:27017')
MONGO_DB = os.getenv('MONGO_DB', 'timetable')
client = MongoClient(MONGO_URI)
db = client[MONGO_DB]
store = SectionStore(db)


# Helper Functions
def parse_sections(payload):
    if not isinstance(payload, dict):
        raise ValueError("Request body must be a JSON object")
    raw = payload.get('sections')
    if not isinstance(raw, list):
        raise ValueError("'sections' must be a list")
    if not all(isinstance(s, dict) for s in raw):
        raise ValueError("Every section must be a JSON object")
    return [Section.from_dict(s) for s in raw]


def parse_coloring(value):
    if not isinstance(value, dict):
        raise ValueError("'coloring' must be an object mapping section ids to slots")
    # bool is an int subclass; true/false are not slots
    if not all(isinstance(c, int) and not isinstance(c, bool) for c in value.values()):
        raise ValueError("Every slot in 'coloring' must be an integer")
    return value


def parse_seed(value):
    if value is None or value == '':
        return None
    return int(value)


@app.route('/health')
def health():
    return jsonify({'status': 'healthy', 'service': 'timetable-solver'})


@app.route('/api/solve', methods=['POST'])
def api_solve():
    payload = request.get_json(silent=True) or {}
    try:
        sections = parse_sections(payload)
        preset = iterations_for(payload.get('mode', 'generate'))
        iterations = payload.get('iterations')
        iterations = preset if iterations is None else int(iterations)
        rng = random.Random(parse_seed(payload.get('seed', os.getenv('SOLVER_SEED'))))

        result = solve_greedy(sections, strategy=payload.get('strategy', 'largest_first'))
        greedy_count = result.colors_count
        improved = improve_coloring(result.coloring, result.graph, iterations, rng=rng)
        result.coloring = improved.coloring
        result.colors_count = improved.colors_count
    except (ValueError, TypeError) as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logger.exception("Solve failed")
        return jsonify({'error': str(e)}), 500

    grid, warnings = place_sections(sections, result.coloring, result.colors_count)
    return jsonify({
        'coloring': result.coloring,
        'colors_count': result.colors_count,
        'greedy_colors_count': greedy_count,
        'iterations': iterations,
        'edge_count': result.graph.edge_count,
        'timetable': grid_to_json(grid),
        'warnings': warnings,
    })


@app.route('/api/conflicts', methods=['POST'])
def api_conflicts():
    payload = request.get_json(silent=True) or {}
    try:
        sections = parse_sections(payload)
        result = solve_greedy(sections)
        coloring = payload.get('coloring')
        if coloring is not None:
            coloring = parse_coloring(coloring)
            check_coloring(coloring, result.graph)
    except ColoringContractError as e:
        return jsonify({'error': f'Invalid coloring: {e}'}), 400
    except (ValueError, TypeError) as e:
        return jsonify({'error': str(e)}), 400

    data = result.graph.node_link_data(coloring or result.coloring)
    names = {s.id: s.name for s in sections}
    for node in data['nodes']:
        node['name'] = names.get(node['id'], '')
    return jsonify(data)


@app.route('/api/run_solve/<owner_id>')
def api_run_solve(owner_id):
    mode = request.args.get('mode', 'generate')
    try:
        iterations_for(mode)
        seed = parse_seed(request.args.get('seed'))
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    # stream_with_context keeps the request context alive while the pipeline yields
    return Response(stream_with_context(run_solve_pipeline(store, owner_id, mode=mode, seed=seed)), mimetype='text/plain')


@app.route('/api/timetable/<owner_id>')
def api_timetable(owner_id):
    try:
        doc = store.get_solution(owner_id)
        if not doc:
            return jsonify({'error': 'Not found'}), 404
        return jsonify(doc)
    except Exception as e:
        logger.exception("Could not read timetable for %s", owner_id)
        return jsonify({'error': str(e)}), 500


if __name__ == '__main__':
    app.run(debug=os.getenv('FLASK_DEBUG', '0') == '1')
