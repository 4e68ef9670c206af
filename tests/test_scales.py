import unittest

import pytest

from euphonium_coach.errors import ParseError
from euphonium_coach.note_types import PitchClass
from euphonium_coach.scales import (
    MAJOR_SCALE_STEPS,
    WRITTEN_TONICS,
    ScaleTraversal,
    build_scale,
    next_scale_index,
)


def names(notes):
    return [str(n) for n in notes]


class TestBuildScale(unittest.TestCase):
    def test_c_major(self):
        self.assertEqual(
            names(build_scale("C", 4)),
            ["C4", "D4", "E4", "F4", "G4", "A4", "B4", "C5"],
        )

    def test_clamped_c_major(self):
        notes = build_scale("C", 4, 71)
        self.assertEqual(len(notes), 7)
        self.assertEqual(str(notes[-1]), "B4")

    def test_flat_tonic(self):
        self.assertEqual(
            names(build_scale("Eb", 4)),
            ["D#4", "F4", "G4", "G#4", "A#4", "C5", "D5", "D#5"],
        )
        self.assertEqual(names(build_scale("Bb", 4, 71)), ["A#4"])

    def test_tonic_kept_above_limit(self):
        self.assertEqual(names(build_scale("C", 5, 71)), ["C5"])

    def test_pitch_class_tonic(self):
        self.assertEqual(build_scale(PitchClass.G, 3), build_scale("G", 3))

    def test_steps_sum_to_octave(self):
        self.assertEqual(sum(MAJOR_SCALE_STEPS), 12)
        for tonic in WRITTEN_TONICS:
            notes = build_scale(tonic, 3)
            self.assertEqual(len(notes), 8)
            self.assertEqual(notes[-1].pitch_index - notes[0].pitch_index, 12)
            self.assertEqual(notes[-1].pitch_class, notes[0].pitch_class)

    def test_bad_tonic(self):
        with self.assertRaises(ParseError):
            build_scale("H", 4)

    def test_octave_out_of_range(self):
        with self.assertRaises(ValueError):
            build_scale("C", 9)


@pytest.mark.parametrize("tonic", WRITTEN_TONICS)
def test_clamped_scales_stay_under_limit(tonic):
    notes = build_scale(tonic, 4, 71)
    assert 1 <= len(notes) <= 8
    assert all(n.pitch_index <= 71 for n in notes[1:])
    assert notes == sorted(notes, key=lambda n: n.pitch_index)


class TestTraversal(unittest.TestCase):
    def walk(self, length, steps, index=0, ascending=True):
        visited = []
        for _ in range(steps):
            index, ascending = next_scale_index(index, ascending, length)
            visited.append(index)
        return visited

    def test_three_notes(self):
        self.assertEqual(self.walk(3, 5), [1, 2, 1, 0, 1])

    def test_eight_notes_turn_at_both_ends(self):
        visited = self.walk(8, 16)
        self.assertEqual(visited[:7], [1, 2, 3, 4, 5, 6, 7])
        self.assertEqual(visited[7:14], [6, 5, 4, 3, 2, 1, 0])
        self.assertEqual(visited[14:], [1, 2])

    def test_two_notes(self):
        self.assertEqual(self.walk(2, 4), [1, 0, 1, 0])

    def test_single_note_stays(self):
        self.assertEqual(self.walk(1, 3), [0, 0, 0])

    def test_empty(self):
        with self.assertRaises(ValueError):
            next_scale_index(0, True, 0)

    def test_index_past_end_turns_back(self):
        self.assertEqual(next_scale_index(9, True, 3), (1, False))
        self.assertEqual(next_scale_index(0, False, 3), (1, True))

    def test_scale_traversal(self):
        traversal = ScaleTraversal(build_scale("C", 4, 71))
        self.assertEqual(str(traversal.current), "C4")
        self.assertEqual(str(traversal.advance()), "D4")
        for _ in range(6):
            traversal.advance()
        self.assertEqual(str(traversal.current), "A4")
        traversal.reset()
        self.assertEqual(str(traversal.current), "C4")
        self.assertTrue(traversal.ascending)

    def test_empty_traversal(self):
        with self.assertRaises(ValueError):
            ScaleTraversal([])


if __name__ == "__main__":
    unittest.main()
