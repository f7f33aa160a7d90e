import csv
import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout

import analyze_rounds as ar


def write_rows(path, rows):
    with open(path, "w", newline="") as f:
        w = csv.DictWriter(f, fieldnames=["session_id", "round", "species", "count", "infections", "moves", "aborted"])
        w.writeheader()
        w.writerows(rows)


def row(sid, rnd, species, count, infections=0, moves=0):
    return dict(session_id=sid, round=rnd, species=species, count=count,
                infections=infections, moves=moves, aborted=0)


class TestAnalyzeRounds(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.csv = os.path.join(self.tmp.name, "rounds.csv")
        write_rows(self.csv, [
            row("old", 1, "Rover", 9), row("old", 1, "Trap", 1),
            row("new", 1, "Rover", 5, infections=2, moves=3), row("new", 1, "Trap", 5, infections=2, moves=3),
            row("new", 2, "Rover", 7, infections=1, moves=4), row("new", 2, "Trap", 3, infections=1, moves=4),
        ])

    def tearDown(self):
        self.tmp.cleanup()

    def test_latest_session(self):
        with redirect_stdout(io.StringIO()):
            df = ar.filter_session(ar.load_rounds(self.csv), "latest")
        self.assertEqual(set(df["session_id"]), {"new"})
        counts = ar.species_counts(df)
        self.assertEqual(list(counts.columns), ["Rover", "Trap"])
        self.assertEqual(list(counts["Rover"]), [5, 7])
        events = ar.round_events(df)
        self.assertEqual(list(events["infections"]), [2, 1])
        self.assertEqual(list(events["moves"]), [3, 4])

    def test_all_sessions_average(self):
        df = ar.filter_session(ar.load_rounds(self.csv), "")
        counts = ar.species_counts(df)
        self.assertEqual(counts.loc[1, "Rover"], 7)

    def test_main_writes_outputs(self):
        outdir = os.path.join(self.tmp.name, "reports")
        with redirect_stdout(io.StringIO()):
            code = ar.main(["--csv", self.csv, "--outdir", outdir, "--tag", "t"])
        self.assertEqual(code, 0)
        names = os.listdir(outdir)
        self.assertTrue(any(n.endswith("__t.png") for n in names))
        self.assertTrue(any(n.startswith("species_counts_") for n in names))


if __name__ == '__main__':
    unittest.main()
