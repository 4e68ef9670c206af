import random
import unittest

from euphonium_coach.fingering import FingeringTable
from euphonium_coach.note_types import FingeringFeedback
from euphonium_coach.note_utils import parse_note
from euphonium_coach.practice import FLASHCARDS, SCALES, PracticeSession, practice_pool


class TestPracticePool(unittest.TestCase):
    def test_default_pool_is_one_octave(self):
        pool = practice_pool()
        self.assertEqual(len(pool), 12)
        self.assertEqual(str(pool[0]), "C4")
        self.assertEqual(str(pool[-1]), "B4")

    def test_empty_range(self):
        with self.assertRaises(ValueError):
            practice_pool(72, 60)


class TestFlashcards(unittest.TestCase):
    def setUp(self):
        self.session = PracticeSession(rng=random.Random(7))

    def test_targets_come_from_pool(self):
        pool = set(practice_pool())
        self.assertIn(self.session.current_target, pool)
        for _ in range(20):
            self.assertIn(self.session.next_target(), pool)

    def test_seeded_sessions_repeat(self):
        other = PracticeSession(rng=random.Random(7))
        self.assertEqual(
            [self.session.next_target() for _ in range(5)],
            [other.next_target() for _ in range(5)],
        )

    def test_valve_presses_build_a_fingering(self):
        session = PracticeSession(pool=[parse_note("C#4")])
        self.assertIs(session.press_valve(1), FingeringFeedback.PARTIAL)
        self.assertIs(session.press_valve(3), FingeringFeedback.PARTIAL)
        self.assertIs(session.press_valve(2), FingeringFeedback.CORRECT)
        self.assertEqual(session.held_valves, "123")
        self.assertIs(session.press_valve(1), FingeringFeedback.PARTIAL)
        self.assertEqual(session.held_valves, "23")
        self.assertIs(session.release_valves(), FingeringFeedback.WRONG)
        self.assertEqual(session.held_valves, "0")

    def test_submit_fingering_uses_held_valves(self):
        session = PracticeSession(pool=[parse_note("D4")])
        session.press_valve(1)
        session.press_valve(3)
        self.assertTrue(session.submit_fingering())
        self.assertEqual(session.held_valves, "0")
        self.assertFalse(session.submit_fingering("2"))
        self.assertEqual(session.stats["fingering_attempts"], 2)
        self.assertEqual(session.stats["fingering_correct"], 1)

    def test_custom_table(self):
        table = FingeringTable({"C4": ["0"], "C#4": ["12"]})
        session = PracticeSession(fingering_table=table, pool=[parse_note("C#4")])
        self.assertTrue(session.submit_fingering({1, 2}))

    def test_submit_pitch(self):
        session = PracticeSession(pool=[parse_note("C4")])
        feedback = session.submit_pitch(233.08)
        self.assertTrue(feedback.in_tune)
        self.assertFalse(session.submit_pitch(None).in_tune)
        self.assertEqual(session.stats["pitch_attempts"], 2)
        self.assertEqual(session.stats["pitch_in_tune"], 1)

    def test_empty_pool(self):
        with self.assertRaises(ValueError):
            PracticeSession(pool=[])


class TestScaleMode(unittest.TestCase):
    def test_starts_on_tonic_and_walks(self):
        session = PracticeSession(mode=SCALES, tonic="F")
        self.assertEqual(str(session.current_target), "F4")
        self.assertEqual(
            [str(session.next_target()) for _ in range(3)], ["G4", "A4", "A#4"]
        )

    def test_clamped_scale(self):
        session = PracticeSession(mode=SCALES, tonic="G")
        self.assertEqual([str(n) for n in session.scale], ["G4", "A4", "B4"])
        walk = [str(session.next_target()) for _ in range(4)]
        self.assertEqual(walk, ["A4", "B4", "A4", "G4"])

    def test_set_tonic_resets_target(self):
        session = PracticeSession(mode=SCALES, tonic="C")
        session.next_target()
        session.set_tonic("Bb")
        self.assertEqual(str(session.current_target), "A#4")
        self.assertEqual(session.next_target(), parse_note("A#4"))

    def test_unclamped_scale(self):
        session = PracticeSession(mode=SCALES, tonic="D", scale_max_pitch_index=None)
        self.assertEqual(len(session.scale), 8)
        self.assertEqual(str(session.scale[-1]), "D5")

    def test_submit_advances_through_scale(self):
        session = PracticeSession(mode=SCALES, tonic="C")
        self.assertTrue(session.submit_fingering("0"))
        self.assertEqual(str(session.current_target), "D4")
        self.assertTrue(session.submit_fingering("13"))
        self.assertEqual(str(session.current_target), "E4")

    def test_switch_modes(self):
        session = PracticeSession(tonic="A", rng=random.Random(1))
        self.assertEqual(session.mode, FLASHCARDS)
        session.set_mode(SCALES)
        self.assertEqual(str(session.current_target), "A4")
        with self.assertRaises(ValueError):
            session.set_mode("arpeggios")


if __name__ == "__main__":
    unittest.main()
