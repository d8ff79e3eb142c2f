"""Semantic model builder.

Walks a :class:`SheetSyntax` top-down and produces a validated
:class:`Disc`. Validation problems are collected for the whole sheet and
raised together; only a structurally broken tree (a track property with
no active track) stops the walk early.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import NoReturn

from cuesheet.cue.models import (
    Disc,
    FileFormat,
    FileRef,
    Index,
    Time,
    Track,
    TrackFlag,
    TrackMode,
)
from cuesheet.exceptions import (
    CueSemanticError,
    InvalidTimeError,
    IssueKind,
    Position,
    SemanticIssue,
)
from cuesheet.grammar.syntax_nodes import (
    GLOBAL_ONLY_KEYWORDS,
    TRACK_ONLY_KEYWORDS,
    RawTime,
    SheetSyntax,
    Statement,
)

logger = logging.getLogger(__name__)

MIN_TRACK_NUMBER = 1
MAX_TRACK_NUMBER = 99
MAX_INDEX_NUMBER = 99
CATALOG_LENGTHS = (12, 13)
ISRC_LENGTH = 12

# CC-XXX-YY-NNNNN without the dashes
_ISRC_PATTERN = re.compile(r"[A-Z]{2}[A-Z0-9]{3}[0-9]{2}[0-9]{5}")


class _Abort(Exception):
    """Internal: the tree is structurally broken, stop walking."""


@dataclass
class _DiscDraft:
    catalog: str | None = None
    cd_text_file: str | None = None
    file: FileRef | None = None
    performer: str | None = None
    songwriter: str | None = None
    title: str | None = None
    arranger: str | None = None
    remarks: list[str] = field(default_factory=list)


@dataclass
class _TrackDraft:
    number: int
    mode: TrackMode
    position: Position
    file: FileRef | None = None
    flags: set[TrackFlag] = field(default_factory=set)
    performer: str | None = None
    songwriter: str | None = None
    title: str | None = None
    arranger: str | None = None
    isrc: str | None = None
    pregap: Time | None = None
    postgap: Time | None = None
    remarks: list[str] = field(default_factory=list)
    indices: list[Index] = field(default_factory=list)

    def freeze(self) -> Track:
        return Track(
            number=self.number,
            mode=self.mode,
            file=self.file,
            flags=frozenset(self.flags),
            performer=self.performer,
            songwriter=self.songwriter,
            title=self.title,
            arranger=self.arranger,
            isrc=self.isrc,
            pregap=self.pregap,
            postgap=self.postgap,
            remarks=tuple(self.remarks),
            indices=tuple(self.indices),
        )


def _position(stmt: Statement) -> Position:
    return Position(line=stmt.line, column=stmt.column, offset=stmt.offset)


class ModelBuilder:
    """Builds a Disc from a syntax tree.

    The builder is in one of two phases: global (no active track) or
    track N. Each statement is dispatched to ``_cmd_<keyword>``, which
    writes into whichever model is active.

    Args:
        require_sequential_tracks: Report tracks that do not start at 1 or
            do not strictly increase. Duplicates are always reported.
    """

    def __init__(self, *, require_sequential_tracks: bool = True) -> None:
        self.require_sequential_tracks = require_sequential_tracks
        self._issues: list[SemanticIssue] = []
        self._disc = _DiscDraft()
        self._tracks: list[_TrackDraft] = []
        self._current: _TrackDraft | None = None
        self._seen_tracks: set[int] = set()
        self._last_track_number: int | None = None

    def build(self, syntax: SheetSyntax) -> Disc:
        """Walk the tree and return the validated Disc.

        Raises:
            CueSemanticError: With every issue found, ordered by position.
        """
        try:
            for stmt in syntax.global_statements:
                self._dispatch(stmt)
            for block in syntax.tracks:
                self._open_track(block.command)
                for stmt in block.statements:
                    self._dispatch(stmt)
                self._close_track()
        except _Abort:
            logger.debug("Stopped at structural error: %s", self._issues[-1])
            self._issues.sort(key=lambda issue: issue.position.offset)
            raise CueSemanticError(self._issues) from None

        if self._issues:
            self._issues.sort(key=lambda issue: issue.position.offset)
            logger.debug("Cue sheet has %d semantic issue(s)", len(self._issues))
            raise CueSemanticError(self._issues)

        d = self._disc
        return Disc(
            catalog=d.catalog,
            cd_text_file=d.cd_text_file,
            file=d.file,
            performer=d.performer,
            songwriter=d.songwriter,
            title=d.title,
            arranger=d.arranger,
            remarks=tuple(d.remarks),
            tracks=tuple(t.freeze() for t in self._tracks),
        )

    # -- bookkeeping -------------------------------------------------------

    def _report(
        self,
        kind: IssueKind,
        message: str,
        stmt: Statement,
        *,
        component: str | None = None,
        value: int | None = None,
    ) -> None:
        self._issues.append(
            SemanticIssue(
                kind=kind,
                message=message,
                position=_position(stmt),
                component=component,
                value=value,
            )
        )

    def _abort(self, kind: IssueKind, message: str, stmt: Statement) -> NoReturn:
        self._report(kind, message, stmt)
        raise _Abort

    def _dispatch(self, stmt: Statement) -> None:
        logger.debug("Command `%s`. Args: %s", stmt.keyword, stmt.args)
        if stmt.keyword == "TRACK":
            self._abort(
                IssueKind.UNEXPECTED_STATEMENT,
                "TRACK command inside a track block",
                stmt,
            )
        if self._current is None and stmt.keyword in TRACK_ONLY_KEYWORDS:
            self._abort(
                IssueKind.TRACK_PROPERTY_OUTSIDE_TRACK,
                f"{stmt.keyword} appears before any TRACK command",
                stmt,
            )
        if self._current is not None and stmt.keyword in GLOBAL_ONLY_KEYWORDS:
            self._abort(
                IssueKind.UNEXPECTED_STATEMENT,
                f"{stmt.keyword} is only allowed before the first TRACK command",
                stmt,
            )
        method = getattr(self, "_cmd_%s" % stmt.keyword.lower(), None)
        if method is None:
            self._abort(IssueKind.UNEXPECTED_STATEMENT, f"Unknown command {stmt.keyword}", stmt)
        method(stmt)

    def _open_track(self, stmt: Statement) -> None:
        number, mode = stmt.args
        self._check_track_number(number, stmt)
        self._current = _TrackDraft(number=number, mode=TrackMode(mode), position=_position(stmt))

    def _close_track(self) -> None:
        track = self._current
        assert track is not None
        numbers = [idx.number for idx in track.indices]
        if not numbers:
            self._issues.append(
                SemanticIssue(
                    kind=IssueKind.MISSING_INDEX,
                    message=f"Track {track.number:02d} has no INDEX",
                    position=track.position,
                )
            )
        elif 1 not in numbers:
            self._issues.append(
                SemanticIssue(
                    kind=IssueKind.MISSING_INDEX,
                    message=f"Track {track.number:02d} has no INDEX 01",
                    position=track.position,
                )
            )
        self._tracks.append(track)
        self._current = None

    def _target(self) -> _DiscDraft | _TrackDraft:
        return self._current if self._current is not None else self._disc

    # -- validation helpers ------------------------------------------------

    def _check_track_number(self, number: int, stmt: Statement) -> None:
        if not MIN_TRACK_NUMBER <= number <= MAX_TRACK_NUMBER:
            self._report(
                IssueKind.TRACK_NUMBER_RANGE,
                f"Track number {number} is outside {MIN_TRACK_NUMBER}-{MAX_TRACK_NUMBER}",
                stmt,
            )
        elif number in self._seen_tracks:
            self._report(IssueKind.DUPLICATE_TRACK, f"Track {number:02d} is declared twice", stmt)
        elif self.require_sequential_tracks:
            if self._last_track_number is None and number != MIN_TRACK_NUMBER:
                self._report(
                    IssueKind.TRACK_ORDER,
                    f"First track is {number:02d}, expected 01",
                    stmt,
                )
            elif self._last_track_number is not None and number < self._last_track_number:
                self._report(
                    IssueKind.TRACK_ORDER,
                    f"Track {number:02d} follows track {self._last_track_number:02d}",
                    stmt,
                )
        self._seen_tracks.add(number)
        self._last_track_number = number

    def _time(self, raw: RawTime, stmt: Statement) -> Time | None:
        """Validate a raw time; report and return None when out of range."""
        if raw.components is None:
            assert raw.frames is not None
            return Time.from_frames(raw.frames)
        try:
            return Time.from_msf(*raw.components)
        except InvalidTimeError as e:
            self._report(
                IssueKind.TIME_RANGE,
                f"Invalid time {raw.text} in {stmt.keyword}: {e}",
                stmt,
                component=e.component,
                value=e.value,
            )
            return None

    def _catalog_valid(self, value: str, stmt: Statement) -> bool:
        if not value.isdigit() or not value.isascii():
            self._report(
                IssueKind.CATALOG_CHARACTERS,
                f"Catalog number {value!r} must contain only digits",
                stmt,
            )
            return False
        if len(value) not in CATALOG_LENGTHS:
            qualifier = "too short" if len(value) < min(CATALOG_LENGTHS) else "too long"
            self._report(
                IssueKind.CATALOG_LENGTH,
                f"Catalog number {value!r} is {qualifier}: "
                f"{len(value)} digits, expected 12 or 13",
                stmt,
            )
            return False
        return True

    def _isrc_valid(self, value: str, stmt: Statement) -> bool:
        if len(value) != ISRC_LENGTH:
            qualifier = "too short" if len(value) < ISRC_LENGTH else "too long"
            self._report(
                IssueKind.ISRC_LENGTH,
                f"ISRC {value!r} is {qualifier}: {len(value)} characters, expected 12",
                stmt,
            )
            return False
        if not value.isascii() or not _ISRC_PATTERN.fullmatch(value):
            self._report(
                IssueKind.ISRC_FORMAT,
                f"ISRC {value!r} must be 2 upper-case letters, "
                "3 upper-case letters or digits, then 7 digits",
                stmt,
            )
            return False
        return True

    # -- commands ----------------------------------------------------------

    def _cmd_catalog(self, stmt: Statement) -> None:
        (value,) = stmt.args
        if self._catalog_valid(value, stmt):
            self._disc.catalog = value

    def _cmd_cdtextfile(self, stmt: Statement) -> None:
        self._disc.cd_text_file = stmt.args[0]

    def _cmd_file(self, stmt: Statement) -> None:
        path, file_format = stmt.args
        ref = FileRef(path=path, format=FileFormat(file_format) if file_format else None)
        self._target().file = ref

    def _cmd_performer(self, stmt: Statement) -> None:
        self._target().performer = stmt.args[0]

    def _cmd_songwriter(self, stmt: Statement) -> None:
        self._target().songwriter = stmt.args[0]

    def _cmd_title(self, stmt: Statement) -> None:
        self._target().title = stmt.args[0]

    def _cmd_arranger(self, stmt: Statement) -> None:
        self._target().arranger = stmt.args[0]

    def _cmd_rem(self, stmt: Statement) -> None:
        self._target().remarks.append(stmt.args[0])

    def _cmd_flags(self, stmt: Statement) -> None:
        assert self._current is not None
        self._current.flags.update(TrackFlag(flag) for flag in stmt.args)

    def _cmd_isrc(self, stmt: Statement) -> None:
        assert self._current is not None
        (value,) = stmt.args
        if self._isrc_valid(value, stmt):
            self._current.isrc = value

    def _cmd_pregap(self, stmt: Statement) -> None:
        assert self._current is not None
        self._current.pregap = self._time(stmt.args[0], stmt)

    def _cmd_postgap(self, stmt: Statement) -> None:
        assert self._current is not None
        self._current.postgap = self._time(stmt.args[0], stmt)

    def _cmd_index(self, stmt: Statement) -> None:
        track = self._current
        assert track is not None
        number, raw = stmt.args
        declared = [idx.number for idx in track.indices]

        if number > MAX_INDEX_NUMBER:
            self._report(
                IssueKind.INDEX_NUMBER_RANGE,
                f"Index number {number} is outside 0-{MAX_INDEX_NUMBER}",
                stmt,
            )
        elif number in declared:
            self._report(
                IssueKind.DUPLICATE_INDEX,
                f"INDEX {number:02d} is declared twice in track {track.number:02d}",
                stmt,
            )
        elif number > 1 and 1 not in declared:
            self._report(
                IssueKind.INDEX_ORDER,
                f"INDEX {number:02d} appears before INDEX 01 in track {track.number:02d}",
                stmt,
            )

        if raw is None:
            self._report(
                IssueKind.MISSING_INDEX_TIME,
                f"INDEX {number:02d} in track {track.number:02d} has no time",
                stmt,
            )
            # Keep the number so the track is not also reported as index-less
            track.indices.append(Index(number=number, time=Time.from_frames(0)))
            return

        time = self._time(raw, stmt)
        track.indices.append(Index(number=number, time=time if time is not None else Time(0)))


def build_disc(syntax: SheetSyntax, *, require_sequential_tracks: bool = True) -> Disc:
    """Build and validate a Disc from a syntax tree.

    Raises:
        CueSemanticError: If any validation fails.
    """
    builder = ModelBuilder(require_sequential_tracks=require_sequential_tracks)
    return builder.build(syntax)
