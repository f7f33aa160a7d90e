import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout, redirect_stderr
from unittest import mock

from darwin_sim.main import resolve_color, parse_species_arg, prompt_species, build_world, run_cli
from darwin_sim.sim.errors import ConfigurationError
from darwin_sim.sim.rng import RNG
from darwin_sim.sim.program import species_from_source

ROVER = "Rover\nstart:\nifenemy attack\nifempty move\nleft\ngo start\nmove:\nhop\ngo start\nattack:\ninfect\ngo start\n"
TRAP = "Trap\nstart:\nifenemy attack\nleft\ngo start\nattack:\ninfect\ngo start\n"


class TestColors(unittest.TestCase):
    def test_named_and_hex(self):
        self.assertEqual(resolve_color("red"), (255, 0, 0))
        self.assertEqual(resolve_color(" #30a0ff "), (0x30, 0xa0, 0xff))

    def test_unknown(self):
        with self.assertRaises(ConfigurationError):
            resolve_color("notacolour")

    def test_species_arg(self):
        self.assertEqual(parse_species_arg("species/Rover.txt:blue"), ("species/Rover.txt", (0, 0, 255)))
        self.assertEqual(parse_species_arg("C:/x/Rover.txt:blue")[0], "C:/x/Rover.txt")
        for bad in ("Rover.txt", "Rover.txt:", ":red"):
            with self.assertRaises(ConfigurationError):
                parse_species_arg(bad)


class TestCli(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.rover = os.path.join(self.tmp.name, "Rover.txt")
        self.trap = os.path.join(self.tmp.name, "Trap.txt")
        with open(self.rover, "w") as f:
            f.write(ROVER)
        with open(self.trap, "w") as f:
            f.write(TRAP)

    def tearDown(self):
        self.tmp.cleanup()

    def _run(self, *argv):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = run_cli(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_headless_run_writes_csv_and_recording(self):
        csv_path = os.path.join(self.tmp.name, "runs", "rounds.csv")
        npz_path = os.path.join(self.tmp.name, "rec.npz")
        code, out, _ = self._run("--species", f"{self.rover}:red", "--species", f"{self.trap}:green",
                                 "--rounds", "3", "--width", "6", "--height", "6", "--per-species", "4",
                                 "--csv", csv_path, "--record", npz_path)
        self.assertEqual(code, 0)
        self.assertEqual(out.count("Round "), 3)
        self.assertTrue(os.path.exists(csv_path))
        self.assertTrue(os.path.exists(npz_path))
        with open(csv_path) as f:
            self.assertEqual(len(f.read().strip().splitlines()), 1 + 3 * 2)

    def test_show_programs(self):
        code, out, _ = self._run("--species", f"{self.trap}:green", "--show-programs")
        self.assertEqual(code, 0)
        self.assertIn("# Trap", out)
        self.assertIn("ifenemy attack", out)

    def test_bad_program_exits_2(self):
        bad = os.path.join(self.tmp.name, "Bad.txt")
        with open(bad, "w") as f:
            f.write("Bad\njump around\n")
        code, _, err = self._run("--species", f"{bad}:red", "--csv", "")
        self.assertEqual(code, 2)
        self.assertIn("[error]", err)

    def test_bad_dimensions_exit_2(self):
        code, _, err = self._run("--species", f"{self.rover}:red", "--width", "0", "--csv", "")
        self.assertEqual(code, 2)
        self.assertIn("width and height", err)

    def test_prompt_until_blank(self):
        answers = iter([self.rover, "red", "/missing.txt", "red", self.trap, "nocolour",
                        self.trap, "green", ""])
        err = io.StringIO()
        with mock.patch("builtins.input", lambda _prompt: next(answers)), redirect_stderr(err):
            species = prompt_species()
        self.assertEqual([sp.name for sp in species], ["Rover", "Trap"])
        self.assertEqual(err.getvalue().count("[darwin]"), 2)


class TestBuildWorld(unittest.TestCase):
    def test_build(self):
        species = [species_from_source(ROVER, (1, 1, 1)), species_from_source(TRAP, (2, 2, 2))]
        world = build_world(species, 3, 5, 4, RNG(0))
        self.assertEqual((world.width, world.height), (5, 4))
        self.assertEqual(len(world.creatures), 6)
        self.assertEqual([sp.name for sp in world.species], ["Rover", "Trap"])


if __name__ == '__main__':
    unittest.main()
