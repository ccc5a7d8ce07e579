from __future__ import annotations

import unittest

from xpost.entities import EntityTable, lookup

_ENTITY = {"type": "LINK", "mutability": "MUTABLE", "data": {"url": "https://x.test"}}


class TestEntityTable(unittest.TestCase):
    def test_list_and_map_encodings_resolve_identically(self) -> None:
        as_list = EntityTable.from_wire([{"key": "0", "value": _ENTITY}, {"key": 3, "value": _ENTITY}])
        as_map = EntityTable.from_wire({"0": _ENTITY, "3": _ENTITY})

        self.assertEqual(as_list.encoding, "list")
        self.assertEqual(as_map.encoding, "map")
        for key in ("0", 0, "3", 3):
            self.assertIsNotNone(as_list.lookup(key))
            self.assertEqual(as_list.lookup(key), as_map.lookup(key))

    def test_missing_key_and_empty_table(self) -> None:
        table = EntityTable.from_wire({"0": _ENTITY})
        self.assertIsNone(table.lookup("1"))
        self.assertIsNone(table.lookup(None))
        self.assertIsNone(EntityTable.from_wire(None).lookup("0"))
        self.assertIsNone(lookup(None, "0"))

    def test_first_pair_wins_for_duplicate_keys(self) -> None:
        table = EntityTable.from_pairs(
            [
                {"key": "0", "value": _ENTITY},
                {"key": "0", "value": {"type": "DIVIDER", "data": {}}},
            ]
        )
        entity = lookup(table, 0)
        assert entity is not None
        self.assertEqual(entity.type, "LINK")
        self.assertEqual(len(table), 1)


if __name__ == "__main__":
    unittest.main()
