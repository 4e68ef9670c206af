"""Main entry point for the Euphonium Coach CLI."""

import statistics
import sys
import time

import click

from ..core.config import ConfigManager
from ..core.factory import ComponentFactory
from ..errors import ConfigurationError, EuphoniumCoachError
from ..fingering import normalize_valves
from ..instrument import INSTRUMENT_PRESETS
from ..logger import get_logger
from ..logging_config import setup_logging
from ..note_types import FingeringFeedback, PitchFeedback
from ..note_utils import parse_note
from ..audio.pitch_estimator import STRATEGIES
from ..scales import build_scale, next_scale_index
from ..services.audio_providers import read_wav_windows
from ..services.pitch_detection_service import PitchDetectionService

logger = get_logger(__name__)

FEEDBACK_TEXT = {
    FingeringFeedback.CORRECT: "correct",
    FingeringFeedback.PARTIAL: "keep going",
    FingeringFeedback.WRONG: "wrong",
}


def format_feedback(feedback: PitchFeedback) -> str:
    """One status line: target, detected frequency and cents offset."""
    line = f"Target {feedback.target} ~ {feedback.target_frequency:.1f} Hz | "
    if feedback.detected_frequency is None:
        return line + "Detected -"
    heard = f" ({feedback.heard})" if feedback.heard else ""
    mark = "in tune" if feedback.in_tune else "out of tune"
    return (
        line
        + f"Detected {feedback.detected_frequency:.1f} Hz{heard} | "
        + f"Offset {feedback.cents:+d} cents | {mark}"
    )


def _note_argument(ctx, param, value):
    try:
        return parse_note(value)
    except EuphoniumCoachError as e:
        raise click.BadParameter(str(e))


detector_options = [
    click.option("--target", "-n", default="C4", callback=_note_argument, help="Written target note"),
    click.option("--algorithm", "-a", type=click.Choice(sorted(STRATEGIES)), default=None, help="Pitch algorithm"),
    click.option("--noise-gate", type=float, default=None, help="RMS below which input counts as silence"),
    click.option("--window-size", type=int, default=None, help="Samples per analysis window"),
    click.option("--instrument", "-i", type=click.Choice(sorted(INSTRUMENT_PRESETS)), default=None, help="Transposition preset"),
]


def with_detector_options(func):
    for option in reversed(detector_options):
        func = option(func)
    return func


def _create_estimator(factory, algorithm, noise_gate, window_size):
    try:
        return factory.create_pitch_estimator(
            algorithm=algorithm, noise_gate=noise_gate, window_size=window_size
        )
    except ConfigurationError as e:
        raise click.UsageError(str(e))


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--config-dir", type=click.Path(file_okay=False), default=None, help="Configuration directory")
@click.pass_context
def main(ctx, debug, config_dir):
    """Euphonium Coach - pitch and valve practice for 3-valve brass."""
    if debug:
        setup_logging(level="DEBUG")
    ctx.obj = ComponentFactory(ConfigManager(config_dir))


@main.command()
@click.argument("note", callback=_note_argument)
@click.pass_obj
def fingering(factory, note):
    """Show the accepted valve combinations for NOTE (e.g. Bb4)."""
    combos = factory.create_fingering_table().expected_for(note)
    alternatives = f" (also {', '.join(combos[1:])})" if len(combos) > 1 else ""
    click.echo(f"{note}: {combos[0]}{alternatives}")


@main.command()
@click.argument("note", callback=_note_argument)
@click.argument("valves", default="")
@click.pass_obj
def check(factory, note, valves):
    """Grade pressing VALVES (e.g. 13, or 0 for open) on NOTE."""
    try:
        pressed = normalize_valves(valves)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="VALVES")
    table = factory.create_fingering_table()
    result = table.classify(pressed, note)
    click.echo(f"{note} with {pressed}: {FEEDBACK_TEXT[result]} (expected {table.primary_for(note)})")
    if result is not FingeringFeedback.CORRECT:
        sys.exit(1)


@main.command()
@click.argument("tonic")
@click.option("--octave", "-o", type=int, default=None, help="Octave of the tonic")
@click.option("--max-index", type=int, default=None, help="Highest pitch index (71 = B4)")
@click.option("--no-clamp", is_flag=True, help="Show the full octave")
@click.option("--steps", type=int, default=0, help="Also print this many practice steps")
@click.pass_obj
def scale(factory, tonic, octave, max_index, no_clamp, steps):
    """Print the written major scale on TONIC (e.g. Eb)."""
    config = factory.config_manager.get_config("practice")
    octave = config["scale_octave"] if octave is None else octave
    if no_clamp:
        max_index = None
    elif max_index is None:
        max_index = config["scale_max_pitch_index"]
    try:
        notes = build_scale(tonic, octave, max_index)
    except (EuphoniumCoachError, ValueError) as e:
        raise click.BadParameter(str(e), param_hint="TONIC")
    click.echo(" ".join(str(n) for n in notes))

    if steps:
        index, ascending, walk = 0, True, [str(notes[0])]
        for _ in range(steps):
            index, ascending = next_scale_index(index, ascending, len(notes))
            walk.append(str(notes[index]))
        click.echo(" -> ".join(walk))


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@with_detector_options
@click.pass_obj
def analyze(factory, path, target, algorithm, noise_gate, window_size, instrument):
    """Estimate the pitch of a recording window by window."""
    estimator = _create_estimator(factory, algorithm, noise_gate, window_size)
    matcher = factory.create_note_matcher(factory.create_instrument(instrument))
    sample_rate, windows = read_wav_windows(path, estimator.config.window_size)

    detected = []
    for start, window in windows:
        estimate = estimator.estimate(window, sample_rate)
        feedback = matcher.evaluate(estimate.frequency, target)
        click.echo(f"{start:7.3f}s  {format_feedback(feedback)}")
        if estimate.detected:
            detected.append(estimate.frequency)

    if not detected:
        click.echo("No pitch detected")
        return
    summary = matcher.evaluate(statistics.median(detected), target)
    click.echo(f"Median: {format_feedback(summary)}")


@main.command()
@with_detector_options
@click.option("--device", "-d", type=int, default=None, help="Audio input device ID")
@click.option("--device-name", default=None, help="Use the first input device whose name contains this text")
@click.option("--sample-rate", type=int, default=44100, help="Audio sample rate in Hz")
@click.option("--duration", "-t", type=float, default=30.0, help="Seconds to listen")
@click.pass_obj
def listen(
    factory, target, algorithm, noise_gate, window_size, instrument, device, device_name, sample_rate, duration
):
    """Listen to the microphone and show the offset from a target note."""
    from ..services.live_audio import LiveAudioProvider, find_input_device

    if device_name is not None:
        device, info = find_input_device(device_name)
        if device is None:
            raise click.BadParameter(f"No input device matching {device_name!r}", param_hint="--device-name")
        click.echo(f"Using device {device}: {info['name']}")

    estimator = _create_estimator(factory, algorithm, noise_gate, window_size)
    service = PitchDetectionService(
        LiveAudioProvider(device_id=device, sample_rate=sample_rate),
        estimator=estimator,
        matcher=factory.create_note_matcher(factory.create_instrument(instrument)),
        target=target,
    )

    click.echo(f"Listening for {duration:.0f}s. Play {target}. Ctrl+C to stop.")
    service.start(lambda feedback: click.echo(format_feedback(feedback)))
    try:
        time.sleep(duration)
    except KeyboardInterrupt:
        click.echo("\nStopped by user.")
    finally:
        service.stop()


@main.command()
def devices():
    """List audio input devices."""
    from ..services.live_audio import list_input_devices

    for device_id, device in list_input_devices():
        click.echo(
            f"Device {device_id}: {device['name']} "
            f"({device['max_input_channels']} in, {device['default_samplerate']:.0f} Hz)"
        )


if __name__ == "__main__":
    main()
