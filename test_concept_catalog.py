"""Unit tests for concept_engine.catalog."""

import json
import os
import tempfile
import unittest

from concept_engine.catalog import (
    CATALOG,
    DIFFICULTY_TIERS,
    RECOMMENDED_PATH_TARGETS,
    TopicNode,
    build_catalog,
    get_topic,
    list_topics,
    load_catalog_file,
    search_topics,
    topic_name,
    topological_order,
    validate_catalog,
)


def _node(tid, prereqs=(), difficulty="beginner"):
    return TopicNode(tid, tid.title(), f"About {tid}", difficulty, prereqs)


class TestBuiltInCatalog(unittest.TestCase):
    """The shipped CS concept catalog."""

    def test_has_all_topics_in_declared_order(self):
        """Should hold all 26 topics, basic types first."""
        ids = list(CATALOG)
        self.assertEqual(len(ids), 26)
        self.assertEqual(ids[0], "basic-types")
        self.assertEqual(ids[-1], "performance-bottleneck")

    def test_is_read_only(self):
        """Should reject item assignment."""
        with self.assertRaises(TypeError):
            CATALOG["new-topic"] = _node("new-topic")

    def test_nodes_are_frozen(self):
        """Should not allow topic fields to change."""
        with self.assertRaises(Exception):
            CATALOG["recursion"].name = "Changed"

    def test_every_prerequisite_exists_and_graph_is_acyclic(self):
        """Should pass validation and order every topic."""
        self.assertEqual(validate_catalog(CATALOG), [])
        ordered, cyclic = topological_order(CATALOG)
        self.assertEqual(cyclic, [])
        self.assertEqual(sorted(ordered), sorted(CATALOG))

    def test_difficulties_are_known_tiers(self):
        """Should only use the three difficulty tiers."""
        for node in CATALOG.values():
            self.assertIn(node.difficulty, DIFFICULTY_TIERS)

    def test_path_targets_exist(self):
        """Should only name real topics as path targets."""
        for target in RECOMMENDED_PATH_TARGETS:
            self.assertIn(target, CATALOG)


class TestLookups(unittest.TestCase):
    """Lookup, listing, and search helpers."""

    def test_get_topic_known_and_unknown(self):
        """Should return the node, or None for unknown ids."""
        self.assertEqual(get_topic("locks").name, "Locks and Synchronization")
        self.assertIsNone(get_topic("no-such-topic"))

    def test_topic_name_falls_back_to_id(self):
        """Should display unknown ids as themselves."""
        self.assertEqual(topic_name("async-await"), "Async/Await")
        self.assertEqual(topic_name("unknown-id"), "unknown-id")

    def test_list_topics_by_difficulty(self):
        """Should filter to one tier in catalog order."""
        beginner = [n.id for n in list_topics(difficulty="beginner")]
        self.assertEqual(beginner, ["basic-types", "control-flow", "functions-and-scope"])

    def test_search_is_case_insensitive_over_name_and_description(self):
        """Should match names and descriptions regardless of case."""
        ids = [n.id for n in search_topics("MEMORY")]
        self.assertIn("memory-management", ids)
        self.assertIn("memory-leak", ids)
        self.assertIn("garbage-collection", ids)  # matched via description
        self.assertNotIn("recursion", ids)

    def test_blank_search_returns_everything(self):
        """Should return every topic for a blank keyword."""
        self.assertEqual(len(search_topics("  ")), len(CATALOG))


class TestCatalogConstruction(unittest.TestCase):
    """Building and validating catalogs."""

    def test_duplicate_ids_rejected(self):
        """Should raise ValueError on a repeated id."""
        with self.assertRaises(ValueError):
            build_catalog([_node("a"), _node("a")])

    def test_unknown_difficulty_rejected(self):
        """Should raise ValueError for a tier outside the known three."""
        with self.assertRaises(ValueError):
            _node("a", difficulty="expert")

    def test_lists_are_stored_as_tuples(self):
        """Should store prerequisite and related lists as tuples."""
        node = TopicNode("a", "A", "", "beginner", ["x", "y"], ["z"])
        self.assertEqual(node.prerequisites, ("x", "y"))
        self.assertEqual(node.related_topics, ("z",))

    def test_unknown_prerequisite_reported(self):
        """Should warn about prerequisites missing from the catalog."""
        cat = build_catalog([_node("a", ("ghost",))])
        with self.assertLogs("concept_engine.catalog", level="WARNING"):
            problems = validate_catalog(cat)
        self.assertEqual(len(problems), 1)
        self.assertIn("ghost", problems[0])

    def test_cycle_logged_or_rejected_in_strict_mode(self):
        """Should warn on a cycle, or raise ValueError when strict."""
        cat = build_catalog([_node("a", ("b",)), _node("b", ("a",)), _node("c", ("a",)), _node("d")])
        ordered, cyclic = topological_order(cat)
        self.assertEqual(ordered, ["d"])
        self.assertEqual(cyclic, ["a", "b", "c"])

        with self.assertLogs("concept_engine.catalog", level="WARNING"):
            problems = validate_catalog(cat)
        self.assertTrue(any("cycle" in p for p in problems))

        with self.assertLogs("concept_engine.catalog", level="ERROR"):
            with self.assertRaises(ValueError):
                validate_catalog(cat, strict=True)


class TestLoadCatalogFile(unittest.TestCase):
    """Loading catalogs from JSON files."""

    def _write(self, payload):
        fd, path = tempfile.mkstemp(suffix=".json")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload if isinstance(payload, str) else json.dumps(payload))
        self.addCleanup(os.remove, path)
        return path

    def test_loads_topics_in_file_order(self):
        """Should keep file order and default missing fields."""
        path = self._write([
            {"id": "x", "name": "X", "difficulty": "beginner"},
            {"id": "y", "name": "Y", "difficulty": "intermediate", "prerequisites": ["x"],
             "related_topics": ["z"]},
        ])
        cat = load_catalog_file(path)
        self.assertEqual(list(cat), ["x", "y"])
        self.assertEqual(cat["y"].prerequisites, ("x",))
        self.assertEqual(cat["x"].description, "")

    def test_empty_array_is_an_empty_catalog(self):
        """Should load an empty array as a catalog with no topics."""
        self.assertEqual(len(load_catalog_file(self._write([]))), 0)

    def test_malformed_files_raise_value_error(self):
        """Should raise ValueError for bad JSON, shapes, and missing fields."""
        for payload in ("not json", {"id": "x"}, [{"name": "no id"}], ["x"],
                        [{"id": "x", "difficulty": "legendary"}]):
            with self.subTest(payload=payload):
                with self.assertRaises(ValueError):
                    load_catalog_file(self._write(payload))

    def test_id_lists_must_be_lists_of_strings(self):
        """Should reject a string or number where a list of ids is expected."""
        for field_name in ("prerequisites", "related_topics"):
            for bad in ("ab", 5, [1, 2], {"a": 1}):
                payload = [{"id": "x", "difficulty": "beginner", field_name: bad}]
                with self.subTest(field=field_name, value=bad):
                    with self.assertRaises(ValueError):
                        load_catalog_file(self._write(payload))

    def test_id_and_text_fields_must_be_strings(self):
        """Should reject non-string ids, names, descriptions, and difficulties."""
        for entry in (
            {"id": 7, "difficulty": "beginner"},
            {"id": ["x"], "difficulty": "beginner"},
            {"id": "", "difficulty": "beginner"},
            {"id": "x", "difficulty": ["beginner"]},
            {"id": "x", "difficulty": "beginner", "name": 3},
            {"id": "x", "difficulty": "beginner", "description": {"a": 1}},
        ):
            with self.subTest(entry=entry):
                with self.assertRaises(ValueError):
                    load_catalog_file(self._write([entry]))

    def test_missing_file_raises_value_error(self):
        """Should raise ValueError when the file cannot be read."""
        with self.assertRaises(ValueError):
            load_catalog_file("/nonexistent/catalog.json")


if __name__ == "__main__":
    unittest.main()
