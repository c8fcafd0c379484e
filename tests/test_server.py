"""Tests for the layout web service.

Each test starts from POST /api/reset, which builds a fresh 1280×800
layout session.
"""

from __future__ import annotations

import unittest

from fastapi.testclient import TestClient

from planit.web.server import app


class TestLayoutService(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def setUp(self):
        resp = self.client.post("/api/reset")
        self.assertEqual(resp.status_code, 200)

    def _bodies(self, *categories: str) -> dict:
        resp = self.client.post("/api/bodies", json={"categories": list(categories)})
        self.assertEqual(resp.status_code, 200)
        return resp.json()

    def _slot_xy(self, layout: dict, index: int) -> tuple[float, float]:
        s = layout["slots"][index - 1]
        return s["x"], s["y"]

    def test_empty_layout(self):
        data = self.client.get("/api/layout").json()
        self.assertEqual(len(data["slots"]), 18)
        self.assertEqual(data["bodies"], [])
        self.assertIsNone(data["drag"])

    def test_bodies_from_task_state(self):
        resp = self.client.post("/api/bodies", json={
            "categories": ["Cat"],
            "todos": [{"id": "1", "text": "vacuum", "category": "Cleaning"}],
            "completed": [{"id": "2", "text": "read", "category": "Study"}],
        })
        data = resp.json()
        self.assertEqual(set(data["sync"]["placed"]), {"Cat", "Cleaning", "Study"})
        sizes = {b["body"]: b["size"] for b in data["layout"]["bodies"]}
        self.assertEqual(sizes["Cat"], 80.0)
        self.assertGreater(sizes["Study"], 80.0)

    def test_grid_overflow_reported(self):
        data = self._bodies(*[f"P{i}" for i in range(1, 20)])
        self.assertEqual(data["sync"]["unplaced"], ["P19"])
        self.assertEqual(len(data["layout"]["bodies"]), 18)

    def test_viewport(self):
        self._bodies("Cat")
        before = self.client.get("/api/layout").json()["bodies"][0]
        resp = self.client.post("/api/viewport", json={"width": 1280, "height": 1000})
        self.assertTrue(resp.json()["changed"])
        after = resp.json()["layout"]["bodies"][0]
        self.assertEqual(after["slot"], before["slot"])
        self.assertAlmostEqual(after["y"] - before["y"], 200.0)

    def test_invalid_viewport(self):
        resp = self.client.post("/api/viewport", json={"width": 0, "height": 800})
        self.assertEqual(resp.status_code, 400)

    def test_move_and_swap(self):
        self._bodies("A")
        layout = self._bodies("A", "B")["layout"]
        slots = {b["body"]: b["slot"] for b in layout["bodies"]}
        resp = self.client.post("/api/slots/move", json={"body": "A", "slot": slots["B"]})
        self.assertEqual(resp.status_code, 200)
        drop = resp.json()["drop"]
        self.assertEqual(drop["swapped_with"], "B")
        moved = {b["body"]: b["slot"] for b in resp.json()["layout"]["bodies"]}
        self.assertEqual(moved, {"A": slots["B"], "B": slots["A"]})

    def test_move_invalid_slot(self):
        self._bodies("A")
        resp = self.client.post("/api/slots/move", json={"body": "A", "slot": 99})
        self.assertEqual(resp.status_code, 404)

    def test_drag_flow(self):
        layout = self._bodies("A")["layout"]
        origin = layout["bodies"][0]["slot"]
        target = 1 if origin != 1 else 2
        x0, y0 = self._slot_xy(layout, origin)
        tx, ty = self._slot_xy(layout, target)

        resp = self.client.post("/api/drag/start", json={"body": "A", "x": x0, "y": y0})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["highlights"][str(origin)], "nearest")

        resp = self.client.post("/api/drag/move", json={"x": tx, "y": ty})
        self.assertEqual(resp.json()["drag"]["nearest_slot"], target)
        self.assertEqual(resp.json()["highlights"][str(target)], "nearest")

        resp = self.client.post("/api/drag/end", json={"x": tx, "y": ty})
        drop = resp.json()["drop"]
        self.assertTrue(drop["moved"])
        self.assertEqual(drop["to_slot"], target)
        self.assertIsNone(resp.json()["layout"]["drag"])

    def test_drag_cancel(self):
        layout = self._bodies("A")["layout"]
        origin = layout["bodies"][0]["slot"]
        x0, y0 = self._slot_xy(layout, origin)
        self.client.post("/api/drag/start", json={"body": "A", "x": x0, "y": y0})
        resp = self.client.post("/api/drag/cancel")
        self.assertFalse(resp.json()["drop"]["moved"])
        self.assertIsNone(self.client.post("/api/drag/cancel").json()["drop"])

    def test_drag_errors(self):
        resp = self.client.post("/api/drag/start", json={"body": "ghost", "x": 0, "y": 0})
        self.assertEqual(resp.status_code, 404)
        resp = self.client.post("/api/drag/move", json={"x": 0, "y": 0})
        self.assertEqual(resp.status_code, 400)
        resp = self.client.post("/api/drag/end")
        self.assertEqual(resp.status_code, 400)

    def test_orbits(self):
        self._bodies("A")
        data = self.client.get("/api/orbits").json()
        self.assertEqual(data["all"], [500.0, 750.0, 1000.0, 1250.0, 1500.0])
        self.assertEqual(len(data["active"]), 1)

    def test_legacy_layout(self):
        resp = self.client.post("/api/legacy/layout", json={
            "categories": ["Cat", "Cleaning", "Study"],
            "seed": 3,
            "preset_orbits": {"Cat": 500, "Cleaning": 750, "Study": 1000},
        })
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual([b["body"] for b in data["bodies"]], ["Cat", "Cleaning", "Study"])
        self.assertEqual(data["orbits"], [500.0, 750.0, 1000.0])
        self.assertTrue(all(not b["overlapping"] for b in data["bodies"]))

    def _legacy(self, **payload) -> dict:
        resp = self.client.post("/api/legacy/layout", json=payload)
        self.assertEqual(resp.status_code, 200)
        return {b["body"]: b for b in resp.json()["bodies"]}

    @staticmethod
    def _polar(body: dict) -> tuple[float, float]:
        return body["radius"], body["angle"]

    def test_legacy_positions_persist_between_calls(self):
        first = self._legacy(categories=["Study"])["Study"]
        for _ in range(10):
            again = self._legacy(categories=["Study"])["Study"]
            self.assertEqual(self._polar(again), self._polar(first))
            self.assertEqual((again["x"], again["y"]), (first["x"], first["y"]))

    def test_legacy_new_category_keeps_earlier_ones(self):
        first = self._legacy(categories=["Cat", "Cleaning"])
        second = self._legacy(categories=["Cat", "Cleaning", "Study"])
        self.assertEqual(list(second), ["Cat", "Cleaning", "Study"])
        for name in ("Cat", "Cleaning"):
            self.assertEqual(self._polar(second[name]), self._polar(first[name]))

    def test_legacy_size_follows_completed_count(self):
        first = self._legacy(categories=["Cat"])["Cat"]
        grown = self._legacy(
            categories=["Cat"],
            completed=[{"id": "1", "category": "Cat"}],
        )["Cat"]
        self.assertGreater(grown["size"], first["size"])
        self.assertEqual(self._polar(grown), self._polar(first))

    def test_legacy_drops_removed_bodies(self):
        self._legacy(categories=["Cat", "Study"])
        data = self._legacy(categories=["Cat"])
        self.assertEqual(list(data), ["Cat"])

    def test_legacy_reset_starts_over(self):
        data = self._legacy(categories=["Study"], preset_orbits={"Study": 500})
        self.assertEqual(data["Study"]["radius"], 500.0)
        # Without a reset the memoized orbit wins over a new preset.
        data = self._legacy(categories=["Study"], preset_orbits={"Study": 750})
        self.assertEqual(data["Study"]["radius"], 500.0)
        self.client.post("/api/reset")
        data = self._legacy(categories=["Study"], preset_orbits={"Study": 750})
        self.assertEqual(data["Study"]["radius"], 750.0)

    def test_drag_end_with_one_coordinate(self):
        layout = self._bodies("A")["layout"]
        origin = layout["bodies"][0]["slot"]
        x0, y0 = self._slot_xy(layout, origin)
        self.client.post("/api/drag/start", json={"body": "A", "x": x0, "y": y0})
        resp = self.client.post("/api/drag/end", json={"x": x0})
        self.assertEqual(resp.status_code, 422)
        self.assertIsNotNone(self.client.get("/api/layout").json()["drag"])
        resp = self.client.post("/api/drag/end", json={"x": x0, "y": y0})
        self.assertEqual(resp.json()["drop"]["to_slot"], origin)


if __name__ == "__main__":
    unittest.main()
