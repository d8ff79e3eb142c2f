"""Domain model for validated CUE sheets."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum

from cuesheet.exceptions import InvalidTimeError

# CD audio constants
FRAMES_PER_SECOND = 75
SECONDS_PER_MINUTE = 60
CD_SAMPLE_RATE = 44100
CD_SAMPLES_PER_FRAME = CD_SAMPLE_RATE // FRAMES_PER_SECOND  # 588


class TrackMode(str, Enum):
    """Data type of a track, as written after ``TRACK nn``."""

    AUDIO = "AUDIO"
    CDG = "CDG"
    MODE1_2048 = "MODE1/2048"
    MODE1_2352 = "MODE1/2352"
    MODE2_2336 = "MODE2/2336"
    MODE2_2352 = "MODE2/2352"
    CDI_2336 = "CDI/2336"
    CDI_2352 = "CDI/2352"


class FileFormat(str, Enum):
    """Format keyword of a ``FILE`` command."""

    BINARY = "BINARY"
    MOTOROLA = "MOTOROLA"
    AIFF = "AIFF"
    WAVE = "WAVE"
    MP3 = "MP3"


class TrackFlag(str, Enum):
    """Subcode flags set by ``FLAGS``."""

    PRE = "PRE"  # pre-emphasis
    DCP = "DCP"  # digital copy permitted
    FOUR_CHANNEL = "4CH"
    SCMS = "SCMS"  # serial copy management system


@dataclass(frozen=True, order=True)
class Time:
    """A position or length in CD frames (1/75 s).

    ``msf`` keeps the ``(minutes, seconds, frames)`` triple when the value
    was written in that form. Equality and ordering only look at
    ``total_frames``, so ``00:01:00`` equals a bare ``75``.
    """

    total_frames: int
    msf: tuple[int, int, int] | None = field(default=None, compare=False)

    @classmethod
    def from_msf(cls, minutes: int, seconds: int, frames: int) -> Time:
        """Build a time from an ``mm:ss:ff`` triple.

        Raises:
            InvalidTimeError: If seconds >= 60 or frames >= 75.
        """
        if seconds >= SECONDS_PER_MINUTE:
            raise InvalidTimeError("seconds", seconds, SECONDS_PER_MINUTE)
        if frames >= FRAMES_PER_SECOND:
            raise InvalidTimeError("frames", frames, FRAMES_PER_SECOND)
        total = (minutes * SECONDS_PER_MINUTE + seconds) * FRAMES_PER_SECOND + frames
        return cls(total_frames=total, msf=(minutes, seconds, frames))

    @classmethod
    def from_frames(cls, frames: int) -> Time:
        return cls(total_frames=frames)

    def to_msf(self) -> tuple[int, int, int]:
        total_seconds, frames = divmod(self.total_frames, FRAMES_PER_SECOND)
        minutes, seconds = divmod(total_seconds, SECONDS_PER_MINUTE)
        return minutes, seconds, frames

    @property
    def seconds(self) -> float:
        return self.total_frames / FRAMES_PER_SECOND

    def to_timedelta(self) -> timedelta:
        return timedelta(seconds=self.seconds)

    def to_samples(self, sample_rate: int = CD_SAMPLE_RATE) -> int:
        """Convert to a sample offset (588 samples per frame at 44.1kHz)."""
        return self.total_frames * sample_rate // FRAMES_PER_SECOND

    def format_msf(self) -> str:
        minutes, seconds, frames = self.to_msf()
        return f"{minutes:02d}:{seconds:02d}:{frames:02d}"

    def __str__(self) -> str:
        if self.msf is None:
            return str(self.total_frames)
        return self.format_msf()


@dataclass(frozen=True)
class Index:
    """An ``INDEX nn`` point within a track."""

    number: int
    time: Time


@dataclass(frozen=True)
class FileRef:
    """A ``FILE`` reference. The path is opaque and never resolved here."""

    path: str
    format: FileFormat | None = None


@dataclass(frozen=True)
class Track:
    """A single track within a cue sheet."""

    number: int
    mode: TrackMode
    file: FileRef | None = None
    flags: frozenset[TrackFlag] = frozenset()
    performer: str | None = None
    songwriter: str | None = None
    title: str | None = None
    arranger: str | None = None
    isrc: str | None = None
    pregap: Time | None = None
    postgap: Time | None = None
    remarks: tuple[str, ...] = ()
    indices: tuple[Index, ...] = ()

    def index(self, number: int) -> Index | None:
        """Return the index with the given number, if declared."""
        for idx in self.indices:
            if idx.number == number:
                return idx
        return None

    @property
    def start(self) -> Time | None:
        """Time of INDEX 01, the audible start of the track."""
        idx = self.index(1)
        return idx.time if idx is not None else None


@dataclass(frozen=True)
class Disc:
    """A parsed cue sheet with global metadata and track list."""

    catalog: str | None = None
    cd_text_file: str | None = None
    file: FileRef | None = None
    performer: str | None = None
    songwriter: str | None = None
    title: str | None = None
    arranger: str | None = None
    remarks: tuple[str, ...] = ()
    tracks: tuple[Track, ...] = ()

    def track(self, number: int) -> Track | None:
        """Return the track with the given number, if declared."""
        for track in self.tracks:
            if track.number == number:
                return track
        return None

    def track_files(self) -> list[tuple[Track, FileRef | None]]:
        """Pair every track with the FILE in effect for it.

        The disc-level FILE applies until a track declares its own; a
        track-level FILE stays in effect for the tracks after it.
        """
        current = self.file
        result: list[tuple[Track, FileRef | None]] = []
        for track in self.tracks:
            if track.file is not None:
                current = track.file
            result.append((track, current))
        return result
