import unittest

import numpy as np
import pytest

from honest_pitch.graph import (
    graph_y,
    graph_x,
    rainbow_hue,
    rainbow_color,
    rainbow_rgb,
    note_grid,
)


class TestGraphY(unittest.TestCase):
    def test_a_is_at_the_bottom(self):
        self.assertEqual(graph_y(440.0), 0.0)
        self.assertEqual(graph_y(220.0), 0.0)
        self.assertEqual(graph_y(110.0), 0.0)

    def test_half_octave_above_a(self):
        # D#5 is six semitones above A4
        self.assertAlmostEqual(graph_y(440.0 * 2 ** 0.5), 200.0)

    def test_below_musical_range(self):
        self.assertEqual(graph_y(19.0), 0.0)
        self.assertEqual(graph_y(0.0), 0.0)

    def test_low_frequencies_stay_in_range(self):
        y = graph_y(21.0)
        self.assertGreaterEqual(y, 0.0)
        self.assertLess(y, 400.0)

    def test_custom_height(self):
        self.assertAlmostEqual(graph_y(440.0 * 2 ** 0.25, height=100.0), 25.0)


@pytest.mark.parametrize("frequency", np.geomspace(20.0, 2000.0, 101)[:-1])
def test_graph_y_is_octave_periodic(frequency):
    low, high = graph_y(frequency), graph_y(frequency * 2)
    # Positions a hair either side of the wrap are the same place on the graph
    distance = abs(low - high)
    assert min(distance, 400.0 - distance) == pytest.approx(0.0, abs=1e-6)


class TestGraphX(unittest.TestCase):
    def test_wraps_every_window(self):
        self.assertAlmostEqual(graph_x(7.5, 300.0), 150.0)
        self.assertAlmostEqual(graph_x(22.5, 300.0), 150.0)
        self.assertEqual(graph_x(0.0, 300.0), 0.0)


class TestRainbow(unittest.TestCase):
    def test_hue(self):
        self.assertEqual(rainbow_hue(0.0), 0.0)
        self.assertEqual(rainbow_hue(200.0), 180.0)

    def test_css_color(self):
        self.assertEqual(rainbow_color(0.0), "hsl(0, 70%, 60%)")
        self.assertEqual(rainbow_color(100.0), "hsl(90, 70%, 60%)")

    def test_rgb(self):
        # Hue 0 is red
        r, g, b = rainbow_rgb(0.0)
        self.assertGreater(r, g)
        self.assertEqual(g, b)
        # Hue 120 is green
        r, g, b = rainbow_rgb(400.0 / 3)
        self.assertGreater(g, r)
        self.assertGreater(g, b)

    def test_deterministic(self):
        self.assertEqual(rainbow_rgb(123.4), rainbow_rgb(123.4))


class TestNoteGrid(unittest.TestCase):
    def test_untransposed(self):
        grid = note_grid()
        self.assertEqual(len(grid), 12)
        self.assertEqual(grid[0], (0.0, "A4"))
        self.assertEqual(grid[3][1], "C5")
        self.assertEqual(grid[11][1], "G#5")
        self.assertAlmostEqual(grid[6][0], 200.0)

    def test_transposed(self):
        grid = note_grid(transpose=2)
        self.assertEqual(grid[0][1], "B4")
        self.assertEqual(grid[1][1], "C5")

    def test_grid_lines_match_graph_positions(self):
        from honest_pitch.note_utils import note_frequency

        for y, label in note_grid():
            name, octave = label[:-1], int(label[-1])
            self.assertAlmostEqual(graph_y(note_frequency(name, octave)) % 400.0, y, places=6)


if __name__ == "__main__":
    unittest.main()
