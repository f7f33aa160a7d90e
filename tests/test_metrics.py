import csv
import os
import tempfile
import unittest

import numpy as np

from darwin_sim.sim.metrics import (
    census, species_labels, summarize_round, format_summary, census_rows, append_csv, CSV_FIELDS,
)
from darwin_sim.sim.engine import RoundStats
from darwin_sim.sim.world import World
from darwin_sim.sim.rng import RNG
from darwin_sim.sim.models import Direction
from darwin_sim.sim.program import species_from_source
from darwin_sim.ui.recorder import Recorder


def small_world():
    world = World(3, 2, RNG(1))
    a = world.add_species(species_from_source("Ant\nhop\n", (255, 0, 0)))
    b = world.add_species(species_from_source("Bee\nleft\n", (0, 255, 0)))
    world.spawn(a, (0, 0), Direction.NORTH)
    world.spawn(a, (1, 0), Direction.EAST)
    world.spawn(b, (2, 1), Direction.SOUTH)
    return world, a, b


class TestCensus(unittest.TestCase):
    def test_counts_by_species(self):
        world, _, _ = small_world()
        self.assertEqual(census(world), {"Ant": 2, "Bee": 1})

    def test_duplicate_names_are_suffixed(self):
        world, _, _ = small_world()
        world.add_species(species_from_source("Ant\nright\n", (0, 0, 0)))
        self.assertEqual(species_labels(world), ["Ant#0", "Bee", "Ant#2"])

    def test_summary_row(self):
        world, _, _ = small_world()
        stats = RoundStats(round=4, turns=3, moves=1, infections=2, aborted=0)
        row = summarize_round(stats, world)
        self.assertEqual(row["round"], 4)
        self.assertEqual(row["n"], 3)
        self.assertEqual(row["counts"], {"Ant": 2, "Bee": 1})
        line = format_summary(row)
        self.assertTrue(line.startswith("Round    4"))
        self.assertIn("Bee=1", line)

    def test_species_named_like_summary_fields(self):
        world = World(3, 1, RNG(1))
        world.add_species(species_from_source("round\nhop\n", (255, 0, 0)))
        n = world.add_species(species_from_source("n\nleft\n", (0, 255, 0)))
        world.spawn(n, (0, 0), Direction.EAST)
        world.spawn(n, (2, 0), Direction.WEST)
        row = summarize_round(RoundStats(round=7, turns=2), world)
        self.assertEqual(row["round"], 7)
        self.assertEqual(row["n"], 2)
        self.assertEqual(row["counts"], {"round": 0, "n": 2})
        line = format_summary(row)
        self.assertTrue(line.startswith("Round    7 | N=  2"))
        self.assertTrue(line.endswith("| round=0 n=2"))

    def test_append_csv_writes_header_once(self):
        world, _, _ = small_world()
        with tempfile.TemporaryDirectory() as d:
            path = os.path.join(d, "runs", "rounds.csv")
            append_csv(path, census_rows(RoundStats(round=1), world, "abc"))
            append_csv(path, census_rows(RoundStats(round=2, infections=1), world, "abc"))
            with open(path, newline="") as f:
                rows = list(csv.DictReader(f))
        self.assertEqual(len(rows), 4)
        self.assertEqual(list(rows[0].keys()), CSV_FIELDS)
        self.assertEqual(rows[3]["species"], "Bee")
        self.assertEqual(rows[3]["infections"], "1")


class TestRecorder(unittest.TestCase):
    def test_disabled_captures_nothing(self):
        world, _, _ = small_world()
        rec = Recorder(enabled=False)
        rec.maybe_capture(world, 1)
        self.assertEqual(len(rec), 0)

    def test_stride(self):
        world, _, _ = small_world()
        rec = Recorder(enabled=True, stride_rounds=2)
        for r in range(1, 6):
            rec.maybe_capture(world, r)
        self.assertEqual(rec.round_list, [2, 4])

    def test_save_npz(self):
        world, a, b = small_world()
        rec = Recorder(enabled=True)
        rec.maybe_capture(world, 1)
        world.infect(world.creatures[2], a, 0)
        rec.maybe_capture(world, 2)
        with tempfile.TemporaryDirectory() as d:
            path = rec.save_npz(world, os.path.join(d, "run.npz"))
            with np.load(path) as data:
                self.assertEqual(data["occupancy"].shape, (2, 2, 3))
                self.assertEqual(int(data["occupancy"][0, 1, 2]), b)
                self.assertEqual(int(data["occupancy"][1, 1, 2]), a)
                self.assertEqual(int(data["occupancy"][0, 1, 0]), -1)
                self.assertEqual(list(data["round"]), [1, 2])
                self.assertEqual(list(data["species_names"]), ["Ant", "Bee"])
                self.assertEqual(tuple(data["species_colors"][1]), (0, 255, 0))

    def test_save_without_frames(self):
        world, _, _ = small_world()
        self.assertIsNone(Recorder(enabled=True).save_npz(world, "unused.npz"))


if __name__ == '__main__':
    unittest.main()
