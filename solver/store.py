from datetime import datetime

from bson import ObjectId
from bson.errors import InvalidId

from solver.models import Section


def owner_filter(owner_id):
    """Owner ids are stored as ObjectIds when they look like one, plain strings otherwise."""
    try:
        return {'$in': [owner_id, ObjectId(owner_id)]}
    except (InvalidId, TypeError):
        return owner_id


class SectionStore:
    """Reads sections from and writes solutions to MongoDB. The solver itself never touches the db."""

    def __init__(self, db):
        self.db = db
        self.sections = db['sections']
        self.timetables = db['timetables']

    def load_sections(self, owner_id=None):
        query = {}
        if owner_id is not None:
            query['user_id'] = owner_filter(owner_id)
        # ObjectIds sort by insertion time; the greedy tie-break depends on input order
        return [Section.from_dict(doc) for doc in self.sections.find(query).sort('_id', 1)]

    def save_solution(self, owner_id, mode, result, grid):
        self.timetables.delete_one({'owner_id': owner_id})
        self.timetables.insert_one({
            'owner_id': owner_id,
            'mode': mode,
            'coloring': result.coloring,
            'colors_count': result.colors_count,
            'timetable': grid,
            'created_at': datetime.now(),
        })

    def get_solution(self, owner_id):
        return self.timetables.find_one({'owner_id': owner_id}, {'_id': 0})
