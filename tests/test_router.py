"""Tests for the pipe router.

Uses the pump → vessel pair (pump dropped to the ground band) on a
1000×600 canvas as the primary case, plus the process-train fixture.

Validates:
  - Nozzles face the target and are grid-snapped
  - Manhattan Z-route through the dominant-axis midpoint
  - First/last waypoint equal the nozzle points for every strategy
  - Orthogonal strategies never emit diagonal segments, snapped or not
  - A* falls back to manhattan (with a diagnostic) when boxed in
  - Missing equipment drops the connection with a diagnostic
  - Pipe categories, line styles, widths and flow arrows
  - Route editing helpers and serialization
"""

from __future__ import annotations

import json
import math
import unittest

from pidlayout.pipeline.config import CanvasConfig, RouterConfig, ConfigurationError
from pidlayout.pipeline.diagnostics import MISSING_REFERENCE, SEARCH_EXHAUSTION
from pidlayout.pipeline.diagram import (
    EquipmentNode, EquipmentCategory, Connection, parse_equipment,
)
from pidlayout.pipeline.placer import place_equipment
from pidlayout.pipeline.router import (
    RoutingStrategy, PipeCategory,
    route_pipes, auto_generate_connections, reroute_pipe, order_by_length,
    connection_point, flow_arrows, route_length, is_orthogonal,
    OccupiedSpace, OccupiedRect,
    RouteContext, route_manhattan, route_orthogonal, route_smart,
    categorize_pipe, line_style, line_width,
    routing_to_dict, parse_routing,
)
from tests.process_fixture import make_equipment, make_connections


CANVAS = CanvasConfig(1000, 600)


def _placed_pair() -> list[EquipmentNode]:
    nodes = parse_equipment([
        {"tag": "P-101", "type": "pump"},
        {"tag": "V-101", "type": "vessel"},
    ])
    return place_equipment(nodes, CANVAS, flow_direction="left-to-right").equipment


def _node(tag: str, x: float, y: float, w: float = 60, h: float = 60) -> EquipmentNode:
    return EquipmentNode(tag=tag, category=EquipmentCategory.OTHER,
                         x=x, y=y, width=w, height=h)


class TestConnectionPoint(unittest.TestCase):

    def test_horizontal_nozzle(self):
        a, b = _node("A", 100, 450), _node("B", 900, 300)
        self.assertEqual(connection_point(a, b), (130, 450))
        self.assertEqual(connection_point(b, a), (870, 300))

    def test_vertical_nozzle(self):
        a, b = _node("A", 100, 100), _node("B", 150, 500)
        self.assertEqual(connection_point(a, b, 40), (100, 140))
        self.assertEqual(connection_point(b, a, 40), (150, 460))


class TestManhattanRoute(unittest.TestCase):
    """Pump at (100, 450), vessel at (900, 300)."""

    def setUp(self):
        self.equipment = _placed_pair()
        self.result = route_pipes(
            self.equipment, [Connection("P-101", "V-101", nominal_size=6)],
            CANVAS, strategy="manhattan",
        )

    def test_pair_positions(self):
        by_tag = {n.tag: n for n in self.equipment}
        self.assertEqual((by_tag["P-101"].x, by_tag["P-101"].y), (100, 450))
        self.assertEqual((by_tag["V-101"].x, by_tag["V-101"].y), (900, 300))

    def test_z_route(self):
        route = self.result.routes[0]
        self.assertEqual(route.waypoints,
                         [(125, 450), (500, 450), (500, 300), (875, 300)])
        self.assertEqual(route.from_point, (125, 450))
        self.assertEqual(route.to_point, (875, 300))
        self.assertEqual(route.id, "pipe_0")
        self.assertEqual(route.strategy, RoutingStrategy.MANHATTAN)

    def test_style(self):
        route = self.result.routes[0]
        self.assertEqual(route.category, PipeCategory.PROCESS)
        self.assertEqual(route.line_style, "solid")
        self.assertEqual(route.line_width, 4)
        self.assertEqual(len(route.flow_arrows), 3)

    def test_clean_result(self):
        self.assertTrue(self.result.ok)
        self.assertEqual(self.result.dropped, [])

    def test_parallel_stagger(self):
        """The second of two parallel pipes moves its riser by the pipe spacing."""
        result = route_pipes(
            self.equipment,
            [Connection("P-101", "V-101"), Connection("P-101", "V-101")],
            CANVAS, avoid_crossings=False,
        )
        first, second = result.routes
        self.assertEqual(first.waypoints[1][0], 500)
        self.assertEqual(second.waypoints[1][0], 525)
        self.assertEqual(second.id, "pipe_1")


class TestEndpointsAndShape(unittest.TestCase):
    """Invariants over the process-train fixture, every strategy."""

    @classmethod
    def setUpClass(cls):
        cls.equipment = place_equipment(make_equipment()).equipment
        cls.connections = make_connections()

    def test_endpoints_match_nozzles(self):
        for strategy in RoutingStrategy:
            with self.subTest(strategy=strategy.value):
                result = route_pipes(self.equipment, self.connections, strategy=strategy)
                self.assertEqual(len(result.routes), len(self.connections))
                for route in result.routes:
                    self.assertGreaterEqual(len(route.waypoints), 2)
                    self.assertEqual(route.waypoints[0], route.from_point)
                    self.assertEqual(route.waypoints[-1], route.to_point)

    def test_orthogonal_segments(self):
        for strategy in ("manhattan", "orthogonal", "smart"):
            with self.subTest(strategy=strategy):
                result = route_pipes(self.equipment, self.connections, strategy=strategy)
                for route in result.routes:
                    self.assertTrue(is_orthogonal(route.waypoints), route.waypoints)

    def test_waypoints_on_grid(self):
        result = route_pipes(self.equipment, self.connections, strategy="orthogonal")
        for route in result.routes:
            for x, y in route.waypoints:
                self.assertEqual(x % 25, 0)
                self.assertEqual(y % 25, 0)

    def test_unknown_strategy(self):
        with self.assertRaises(ConfigurationError):
            route_pipes(self.equipment, self.connections, strategy="bezier")


class TestOrthogonalStrategy(unittest.TestCase):

    def setUp(self):
        self.space = OccupiedSpace([OccupiedRect(400, 250, 100, 100, "E-1", "equipment")])
        self.ctx = RouteContext(space=self.space, config=RouterConfig(),
                                bounds=(50, 50, 950, 550))

    def test_detour_around_obstacle(self):
        waypoints = route_orthogonal((100, 300), (900, 400), 1, self.ctx)
        self.assertEqual(waypoints, [
            (100, 300), (300, 300), (300, 415), (700, 415), (700, 400), (900, 400),
        ])
        self.assertTrue(is_orthogonal(waypoints))

    def test_clear_path_is_l(self):
        self.ctx.ignore = {"E-1"}
        waypoints = route_orthogonal((100, 300), (900, 400), 1, self.ctx)
        self.assertEqual(waypoints, [(100, 300), (515, 300), (515, 400), (900, 400)])


class TestSmartStrategy(unittest.TestCase):

    def test_straight_run(self):
        equipment = [_node("P-101", 100, 300), _node("V-101", 900, 300)]
        result = route_pipes(equipment, [Connection("P-101", "V-101")],
                             CANVAS, strategy="smart")
        route = result.routes[0]
        self.assertEqual(route.waypoints, [(125, 300), (875, 300)])
        self.assertEqual(route.strategy, RoutingStrategy.SMART)
        self.assertTrue(result.ok)

    def test_off_grid_nozzles_stay_orthogonal(self):
        """Unsnapped nozzles join the grid path through elbows, not diagonals."""
        equipment = [_node("P-101", 310, 310), _node("V-101", 810, 510)]
        result = route_pipes(equipment, [Connection("P-101", "V-101")],
                             CANVAS, strategy="smart", snap_to_grid=False)
        route = result.routes[0]
        self.assertEqual(route.strategy, RoutingStrategy.SMART)
        self.assertEqual(route.waypoints[0], (340, 310))
        self.assertEqual(route.waypoints[-1], (780, 510))
        self.assertTrue(is_orthogonal(route.waypoints), route.waypoints)
        self.assertEqual(route.waypoints[1][1], 310)
        self.assertEqual(route.waypoints[-2][1], 510)

    def test_fallback_matches_manhattan(self):
        """Fully occupied space leaves A* nothing to expand."""
        wall = OccupiedSpace([OccupiedRect(0, 0, 2000, 2000, "wall", "equipment")])
        smart_ctx = RouteContext(space=wall, config=RouterConfig(), bounds=(50, 50, 950, 550))
        plain_ctx = RouteContext(space=wall, config=RouterConfig(), bounds=(50, 50, 950, 550))
        got = route_smart((100, 100), (500, 300), 0, smart_ctx)
        self.assertTrue(smart_ctx.fallback)
        self.assertEqual(got, route_manhattan((100, 100), (500, 300), 0, plain_ctx))

    def test_fallback_reported(self):
        equipment = [
            _node("P-101", 100, 300),
            _node("V-101", 900, 300),
            _node("WALL", 500, 300, 2000, 2000),
        ]
        result = route_pipes(equipment, [Connection("P-101", "V-101")],
                             CANVAS, strategy="smart")
        route = result.routes[0]
        self.assertEqual(route.strategy, RoutingStrategy.MANHATTAN)
        self.assertEqual(route.waypoints[0], (125, 300))
        self.assertEqual(route.waypoints[-1], (875, 300))
        self.assertEqual([d.kind for d in result.diagnostics], [SEARCH_EXHAUSTION])


class TestMissingEquipment(unittest.TestCase):

    def test_dropped_with_diagnostic(self):
        result = route_pipes(_placed_pair(), [Connection("P-101", "X-999")], CANVAS)
        self.assertEqual(result.routes, [])
        self.assertEqual(result.dropped, ["P-101->X-999"])
        self.assertEqual(result.diagnostics[0].kind, MISSING_REFERENCE)
        self.assertFalse(result.ok)

    def test_other_connections_still_routed(self):
        result = route_pipes(
            _placed_pair(),
            [Connection("X-999", "V-101"), Connection("P-101", "V-101")],
            CANVAS,
        )
        self.assertEqual([r.id for r in result.routes], ["pipe_1"])


class TestOccupiedSpace(unittest.TestCase):

    def test_equipment_inflated_by_clearance(self):
        space = OccupiedSpace.from_equipment([_node("A", 100, 100)], 30)
        r = space.rects[0]
        self.assertEqual((r.x, r.y, r.width, r.height), (40, 40, 120, 120))
        self.assertEqual(r.kind, "equipment")

    def test_route_corridors(self):
        space = OccupiedSpace()
        space.add_route("pipe_0", [(0, 0), (100, 0), (100, 50)], 30)
        self.assertEqual(len(space), 2)
        first = space.rects[0]
        self.assertEqual((first.x, first.y, first.width, first.height), (-15, -15, 130, 30))
        self.assertEqual(first.owner, "pipe_0")

    def test_ignore_owner(self):
        space = OccupiedSpace([OccupiedRect(40, 40, 20, 20, "A", "equipment")])
        self.assertTrue(space.blocks_box((0, 50), (100, 50)))
        self.assertFalse(space.blocks_box((0, 50), (100, 50), {"A"}))

    def test_field_covers_edges(self):
        space = OccupiedSpace([OccupiedRect(0, 0, 100, 100, "A", "equipment")])
        field_ = space.obstacle_field(0)
        self.assertTrue(field_.blocked(100, 50))
        self.assertFalse(field_.blocked(101, 50))
        self.assertFalse(OccupiedSpace().obstacle_field(10).blocked(0, 0))


class TestStyles(unittest.TestCase):

    def test_categories(self):
        cases = [
            (Connection("A", "B", fluid="LP Steam"), PipeCategory.UTILITY_STEAM),
            (Connection("A", "B", line_number="CW-201"), PipeCategory.UTILITY_COOLING),
            (Connection("A", "B", fluid="Instrument Air"), PipeCategory.UTILITY_AIR),
            (Connection("A", "B", fluid="Nitrogen"), PipeCategory.UTILITY_NITROGEN),
            (Connection("A", "B", connection_type="signal"), PipeCategory.SIGNAL),
            (Connection("A", "B", fluid="Crude"), PipeCategory.PROCESS),
        ]
        for conn, expected in cases:
            with self.subTest(expected=expected.value):
                self.assertEqual(categorize_pipe(conn), expected)

    def test_line_styles(self):
        self.assertEqual(line_style(PipeCategory.PROCESS), "solid")
        self.assertEqual(line_style(PipeCategory.UTILITY_STEAM), "dashed")
        self.assertEqual(line_style(PipeCategory.SIGNAL), "dotted")

    def test_line_widths(self):
        sizes = [14, 12, 8, 6, 4, 3, 2, 1, 0.5]
        self.assertEqual([line_width(s) for s in sizes], [6, 6, 5, 4, 3, 2, 2, 1, 1])


class TestRouteHelpers(unittest.TestCase):

    def test_flow_arrows(self):
        arrows = flow_arrows([(0, 0), (100, 0), (100, 50)])
        self.assertEqual([(a.x, a.y) for a in arrows], [(50, 0), (100, 25)])
        self.assertAlmostEqual(arrows[0].angle, 0.0)
        self.assertAlmostEqual(arrows[1].angle, math.pi / 2)

    def test_route_length(self):
        self.assertEqual(route_length([(0, 0), (30, 40), (30, 100)]), 110)

    def test_auto_generate_connections(self):
        conns = auto_generate_connections(make_equipment())
        self.assertEqual([(c.from_tag, c.to_tag) for c in conns],
                         [("P-101", "E-101"), ("E-101", "T-101"), ("T-101", "V-101")])
        self.assertEqual(conns[0].line_number, "P-101-E-101")
        self.assertEqual(conns[0].nominal_size, 4.0)

    def test_reroute(self):
        routes = route_pipes(_placed_pair(), [Connection("P-101", "V-101")], CANVAS).routes
        edited = reroute_pipe(routes, "pipe_0", [(100, 450), (100, 300), (875, 300)])
        self.assertEqual(edited[0].from_point, (100, 450))
        self.assertEqual(len(edited[0].flow_arrows), 2)
        self.assertEqual(routes[0].from_point, (125, 450))
        with self.assertRaises(ValueError):
            reroute_pipe(routes, "pipe_0", [(0, 0)])

    def test_order_by_length(self):
        equipment = [_node("A", 100, 300), _node("B", 300, 300), _node("C", 900, 300)]
        routes = route_pipes(
            equipment, [Connection("A", "C"), Connection("A", "B")], CANVAS,
        ).routes
        self.assertEqual([r.id for r in order_by_length(routes)], ["pipe_1", "pipe_0"])


class TestRoutingSerialization(unittest.TestCase):

    def test_round_trip(self):
        equipment = place_equipment(make_equipment()).equipment
        result = route_pipes(equipment, make_connections(), strategy="orthogonal")
        restored = parse_routing(json.loads(json.dumps(routing_to_dict(result))))
        self.assertEqual(len(restored.routes), len(result.routes))
        for a, b in zip(restored.routes, result.routes):
            self.assertEqual(a.waypoints, b.waypoints)
            self.assertEqual(a.category, b.category)
            self.assertEqual(a.strategy, b.strategy)
            self.assertEqual(len(a.flow_arrows), len(b.flow_arrows))


if __name__ == "__main__":
    unittest.main()
