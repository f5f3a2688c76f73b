"""Global constants for MIDI Analyzer."""

# Pitch names (sharps only)
PITCH_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

# Timing defaults
DEFAULT_PPQ = 480
DEFAULT_TEMPO_US = 500000  # microseconds per quarter note (120 BPM)
DEFAULT_GROUPING_THRESHOLD_MS = 50.0

# Time signature defaults: numerator, denominator exponent, clocks per click,
# notated 32nd notes per quarter
DEFAULT_TIME_SIGNATURE_BYTES = (4, 2, 24, 8)

# Chord detection
MIN_CHORD_NOTES = 3

MIDI_EXTENSIONS = {".mid", ".midi", ".smf", ".kar"}
