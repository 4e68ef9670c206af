import unittest

from euphonium_coach.errors import ConfigurationError
from euphonium_coach.instrument import INSTRUMENT_PRESETS, TransposingInstrument
from euphonium_coach.note_utils import parse_note


class TestTransposingInstrument(unittest.TestCase):
    def setUp(self):
        self.bb = TransposingInstrument.preset("Bb")

    def test_default_preset_is_bb(self):
        self.assertEqual(TransposingInstrument.preset(), self.bb)
        self.assertEqual(self.bb.transposition_semitones, 2)

    def test_written_c4_sounds_bb3(self):
        self.assertEqual(self.bb.written_to_sounding_pitch_index(60), 58)
        self.assertAlmostEqual(self.bb.target_frequency("C4"), 233.08, places=2)

    def test_concert_pitch_instrument(self):
        concert = TransposingInstrument.preset("C")
        self.assertAlmostEqual(concert.target_frequency("A4"), 440.0)

    def test_treble_clef_transposition(self):
        treble = TransposingInstrument.preset("Bb treble euphonium")
        self.assertEqual(treble.transposition_semitones, 14)
        self.assertAlmostEqual(treble.target_frequency("D5"), 261.63, places=2)

    def test_transposition_is_reversible(self):
        for name in INSTRUMENT_PRESETS:
            instrument = TransposingInstrument.preset(name)
            for index in (36, 60, 71, 84):
                sounding = instrument.written_to_sounding_pitch_index(index)
                self.assertEqual(instrument.sounding_to_written_pitch_index(sounding), index)

    def test_flat_and_sharp_targets_agree(self):
        self.assertEqual(self.bb.target_frequency("Bb4"), self.bb.target_frequency("A#4"))

    def test_reference_pitch(self):
        self.assertAlmostEqual(
            self.bb.target_frequency("B4", reference_a4=442.0), 442.0
        )

    def test_written_note_heard(self):
        self.assertEqual(self.bb.written_note_heard(233.08), parse_note("C4"))
        self.assertEqual(self.bb.written_note_heard(440.0), parse_note("B4"))

    def test_unwritable_frequency(self):
        self.assertIsNone(self.bb.written_note_heard(5.0))

    def test_custom_instrument(self):
        eb = TransposingInstrument("Eb tuba", 9)
        self.assertAlmostEqual(eb.target_frequency("F#5"), 440.0)

    def test_invalid_presets(self):
        with self.assertRaises(ConfigurationError):
            TransposingInstrument.preset("F")
        with self.assertRaises(ConfigurationError):
            TransposingInstrument("half", 1.5)

    def test_accepts_parsed_notes(self):
        note = parse_note("G4")
        self.assertEqual(self.bb.target_frequency(note), self.bb.target_frequency("G4"))


if __name__ == "__main__":
    unittest.main()
