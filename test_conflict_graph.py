"""
Unit tests for conflict graph construction
"""
import unittest

from solver.conflict_graph import build_conflict_graph, sections_conflict
from solver.models import Section


def make_section(sid, teacher, room, group, subject='math'):
    return Section(id=sid, teacher_id=teacher, room_id=room, group_id=group, subject_id=subject)


class TestConflictGraph(unittest.TestCase):

    def test_empty_input(self):
        """No sections gives a graph with no nodes and no edges"""
        graph = build_conflict_graph([])
        self.assertEqual(graph.nodes, [])
        self.assertEqual(graph.adj, {})
        self.assertEqual(graph.edge_count, 0)

    def test_shared_teacher_single_edge(self):
        sections = [
            make_section('a', 't1', 'r1', 'g1'),
            make_section('b', 't1', 'r2', 'g2'),
        ]
        graph = build_conflict_graph(sections)

        self.assertEqual(graph.edge_count, 1)
        self.assertEqual(graph.edges(), [('a', 'b')])
        self.assertEqual(graph.adj['a'], {'b'})
        self.assertEqual(graph.adj['b'], {'a'})

    def test_shared_room_triangle(self):
        sections = [
            make_section('a', 't1', 'r1', 'g1'),
            make_section('b', 't2', 'r1', 'g2'),
            make_section('c', 't3', 'r1', 'g3'),
        ]
        graph = build_conflict_graph(sections)

        self.assertEqual(graph.edge_count, 3)
        for node in 'abc':
            self.assertEqual(graph.degree(node), 2)

    def test_shared_group_conflicts(self):
        s1 = make_section('a', 't1', 'r1', 'g1')
        s2 = make_section('b', 't2', 'r2', 'g1')
        self.assertTrue(sections_conflict(s1, s2))

    def test_subject_is_ignored(self):
        """Sharing only a subject is not a conflict"""
        s1 = make_section('a', 't1', 'r1', 'g1', subject='physics')
        s2 = make_section('b', 't2', 'r2', 'g2', subject='physics')
        self.assertFalse(sections_conflict(s1, s2))
        self.assertEqual(build_conflict_graph([s1, s2]).edge_count, 0)

    def test_disjoint_sections_have_no_edges(self):
        sections = [make_section(f's{i}', f't{i}', f'r{i}', f'g{i}') for i in range(5)]
        graph = build_conflict_graph(sections)

        self.assertEqual(graph.nodes, [s.id for s in sections])
        self.assertEqual(graph.edge_count, 0)
        self.assertTrue(all(len(nbrs) == 0 for nbrs in graph.adj.values()))

    def test_multiple_shared_keys_one_edge(self):
        """Sharing teacher and room and group still yields a single edge"""
        sections = [
            make_section('a', 't1', 'r1', 'g1'),
            make_section('b', 't1', 'r1', 'g1'),
        ]
        graph = build_conflict_graph(sections)
        self.assertEqual(graph.edge_count, 1)

    def test_symmetric_and_irreflexive(self):
        teachers = ['t1', 't2', 't3']
        rooms = ['r1', 'r2', 'r3', 'r4']
        groups = ['g1', 'g2']
        sections = [
            make_section(f's{i}', teachers[i % 3], rooms[i % 4], groups[i % 2])
            for i in range(12)
        ]
        graph = build_conflict_graph(sections)

        for node, nbrs in graph.adj.items():
            self.assertNotIn(node, nbrs)
            for nb in nbrs:
                self.assertIn(node, graph.adj[nb])

        # Every conflicting pair is present, every other pair is absent
        for i, s1 in enumerate(sections):
            for s2 in sections[i + 1:]:
                self.assertEqual(s2.id in graph.adj[s1.id], sections_conflict(s1, s2))

    def test_duplicate_ids_rejected(self):
        sections = [
            make_section('a', 't1', 'r1', 'g1'),
            make_section('a', 't2', 'r2', 'g2'),
        ]
        with self.assertRaises(ValueError):
            build_conflict_graph(sections)

    def test_input_not_mutated(self):
        sections = [
            make_section('a', 't1', 'r1', 'g1'),
            make_section('b', 't1', 'r2', 'g2'),
        ]
        before = list(sections)
        build_conflict_graph(sections)
        self.assertEqual(sections, before)

    def test_networkx_export_matches(self):
        sections = [
            make_section('a', 't1', 'r1', 'g1'),
            make_section('b', 't1', 'r2', 'g2'),
            make_section('c', 't2', 'r2', 'g3'),
            make_section('d', 't4', 'r4', 'g4'),
        ]
        graph = build_conflict_graph(sections)
        G = graph.to_networkx()

        self.assertEqual(list(G.nodes), ['a', 'b', 'c', 'd'])
        self.assertEqual(G.number_of_edges(), graph.edge_count)
        self.assertTrue(G.has_edge('a', 'b'))
        self.assertTrue(G.has_edge('b', 'c'))
        self.assertFalse(G.has_edge('a', 'c'))
        self.assertEqual(G.degree['d'], 0)

    def test_node_link_data_carries_colors(self):
        sections = [
            make_section('a', 't1', 'r1', 'g1'),
            make_section('b', 't1', 'r2', 'g2'),
        ]
        graph = build_conflict_graph(sections)
        data = graph.node_link_data({'a': 0, 'b': 1})

        colors = {n['id']: n['color'] for n in data['nodes']}
        self.assertEqual(colors, {'a': 0, 'b': 1})
        self.assertEqual(len(data['links']), 1)


class TestSectionFromDict(unittest.TestCase):

    def test_mongo_document(self):
        doc = {'_id': 42, 'name': 'Algebra 1A', 'teacher_id': 7, 'room_id': 'R-101',
               'group_id': 'G1', 'subject_id': 'ALG'}
        s = Section.from_dict(doc)

        self.assertEqual(s.id, '42')
        self.assertEqual(s.teacher_id, '7')
        self.assertEqual(s.name, 'Algebra 1A')

    def test_missing_key(self):
        with self.assertRaises(ValueError):
            Section.from_dict({'id': 'a', 'teacher_id': 't', 'room_id': 'r', 'subject_id': 's'})

    def test_missing_id(self):
        with self.assertRaises(ValueError):
            Section.from_dict({'teacher_id': 't', 'room_id': 'r', 'group_id': 'g', 'subject_id': 's'})


if __name__ == '__main__':
    unittest.main()
