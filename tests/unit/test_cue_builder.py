"""Unit tests for semantic validation in the model builder."""

from __future__ import annotations

import pytest

from cuesheet.cue.builder import ModelBuilder, build_disc
from cuesheet.cue.models import FileFormat, FileRef, Time, TrackFlag, TrackMode
from cuesheet.cue.parser import parse
from cuesheet.exceptions import CueSemanticError, IssueKind
from cuesheet.grammar.syntax_nodes import SheetSyntax, Statement, TrackBlock


def _sheet(*track_lines: str, header: str = 'TITLE "Album"\nFILE "a.wav" WAVE\n') -> str:
    return header + "\n".join(track_lines) + "\n"


def _issues(text: str, **kwargs: bool) -> CueSemanticError:
    with pytest.raises(CueSemanticError) as exc_info:
        parse(text, **kwargs)
    return exc_info.value


class TestValidSheets:
    def test_global_and_track_properties(self) -> None:
        disc = parse(
            _sheet(
                "TRACK 01 AUDIO",
                '  TITLE "Intro"',
                '  PERFORMER "Band"',
                "  FLAGS DCP PRE DCP",
                "  ISRC USRC17607839",
                "  PREGAP 00:02:00",
                "  INDEX 00 00:00:00",
                "  INDEX 01 00:02:00",
                "  POSTGAP 150",
                header='CATALOG 0123456789012\nCDTEXTFILE "cd.cdt"\nPERFORMER "Band"\nFILE "a.wav" WAVE\n',
            )
        )
        assert disc.catalog == "0123456789012"
        assert disc.cd_text_file == "cd.cdt"
        assert disc.file == FileRef("a.wav", FileFormat.WAVE)
        track = disc.tracks[0]
        assert track.title == "Intro"
        assert track.flags == frozenset({TrackFlag.DCP, TrackFlag.PRE})
        assert track.isrc == "USRC17607839"
        assert track.pregap == Time.from_msf(0, 2, 0)
        assert track.postgap == Time(150)
        assert [idx.number for idx in track.indices] == [0, 1]
        assert track.start == Time(150)

    def test_twelve_digit_catalog(self) -> None:
        disc = parse(_sheet("TRACK 01 AUDIO", "INDEX 01 00:00:00", header="CATALOG 123456789012\n"))
        assert disc.catalog == "123456789012"

    def test_last_value_wins(self) -> None:
        disc = parse(_sheet("TRACK 01 AUDIO", "INDEX 01 00:00:00", header='TITLE "A"\nTITLE "B"\n'))
        assert disc.title == "B"

    def test_remarks_accumulate(self) -> None:
        disc = parse(
            _sheet(
                "TRACK 01 AUDIO",
                "  REM REPLAYGAIN_TRACK_GAIN -7.89 dB",
                "  INDEX 01 00:00:00",
                header="REM GENRE Rock\nREM DATE 1999\nREM\n",
            )
        )
        assert disc.remarks == ("GENRE Rock", "DATE 1999", "")
        assert disc.tracks[0].remarks == ("REPLAYGAIN_TRACK_GAIN -7.89 dB",)

    def test_track_file_override(self) -> None:
        disc = parse(
            _sheet(
                "TRACK 01 AUDIO",
                "  INDEX 01 00:00:00",
                'FILE "b.wav" WAVE',
                "TRACK 02 AUDIO",
                "  INDEX 01 00:00:00",
            )
        )
        assert disc.file == FileRef("a.wav", FileFormat.WAVE)
        assert disc.tracks[0].file == FileRef("b.wav", FileFormat.WAVE)
        assert disc.tracks[1].file is None

    def test_track_number_gaps_allowed(self) -> None:
        disc = parse(_sheet("TRACK 01 AUDIO", "INDEX 01 0", "TRACK 05 AUDIO", "INDEX 01 0"))
        assert [t.number for t in disc.tracks] == [1, 5]

    def test_non_audio_track(self) -> None:
        disc = parse(_sheet("TRACK 01 MODE1/2352", "INDEX 01 00:00:00"))
        assert disc.tracks[0].mode is TrackMode.MODE1_2352

    def test_sheet_without_tracks(self) -> None:
        disc = parse('TITLE "Empty"\n')
        assert disc.tracks == ()


class TestTrackNumbers:
    def test_out_of_range(self) -> None:
        err = _issues(_sheet("TRACK 00 AUDIO", "INDEX 01 0"))
        assert IssueKind.TRACK_NUMBER_RANGE in err.kinds

    def test_above_range(self) -> None:
        err = _issues(_sheet("TRACK 01 AUDIO", "INDEX 01 0", "TRACK 100 AUDIO", "INDEX 01 0"))
        assert err.kinds == {IssueKind.TRACK_NUMBER_RANGE}
        assert err.position.line == 5

    def test_duplicate(self) -> None:
        err = _issues(_sheet("TRACK 01 AUDIO", "INDEX 01 0", "TRACK 01 AUDIO", "INDEX 01 0"))
        assert err.kinds == {IssueKind.DUPLICATE_TRACK}
        assert err.position.line == 5

    def test_first_track_not_one(self) -> None:
        err = _issues(_sheet("TRACK 02 AUDIO", "INDEX 01 0"))
        assert err.kinds == {IssueKind.TRACK_ORDER}

    def test_decreasing(self) -> None:
        err = _issues(
            _sheet(
                "TRACK 01 AUDIO", "INDEX 01 0",
                "TRACK 03 AUDIO", "INDEX 01 0",
                "TRACK 02 AUDIO", "INDEX 01 0",
            )
        )
        assert err.kinds == {IssueKind.TRACK_ORDER}
        assert err.position.line == 7

    def test_order_check_can_be_disabled(self) -> None:
        disc = parse(
            _sheet("TRACK 03 AUDIO", "INDEX 01 0", "TRACK 02 AUDIO", "INDEX 01 0"),
            require_sequential_tracks=False,
        )
        assert [t.number for t in disc.tracks] == [3, 2]

    def test_duplicates_reported_when_order_disabled(self) -> None:
        err = _issues(
            _sheet("TRACK 02 AUDIO", "INDEX 01 0", "TRACK 02 AUDIO", "INDEX 01 0"),
            require_sequential_tracks=False,
        )
        assert err.kinds == {IssueKind.DUPLICATE_TRACK}


class TestIndices:
    def test_missing_index(self) -> None:
        err = _issues(_sheet("TRACK 01 AUDIO", '  TITLE "No index"'))
        assert err.kinds == {IssueKind.MISSING_INDEX}
        assert err.position.line == 3

    def test_missing_index_one(self) -> None:
        err = _issues(_sheet("TRACK 01 AUDIO", "  INDEX 00 00:00:00"))
        assert err.kinds == {IssueKind.MISSING_INDEX}
        assert "INDEX 01" in err.issues[0].message

    def test_index_out_of_range(self) -> None:
        err = _issues(_sheet("TRACK 01 AUDIO", "  INDEX 01 0", "  INDEX 100 500"))
        assert err.kinds == {IssueKind.INDEX_NUMBER_RANGE}

    def test_duplicate_index(self) -> None:
        err = _issues(_sheet("TRACK 01 AUDIO", "  INDEX 01 0", "  INDEX 01 75"))
        assert err.kinds == {IssueKind.DUPLICATE_INDEX}
        assert err.position.line == 5

    def test_index_before_index_one(self) -> None:
        err = _issues(_sheet("TRACK 01 AUDIO", "  INDEX 02 00:10:00", "  INDEX 01 00:00:00"))
        assert err.kinds == {IssueKind.INDEX_ORDER}

    def test_index_zero_before_one_is_fine(self) -> None:
        disc = parse(_sheet("TRACK 01 AUDIO", "  INDEX 00 0", "  INDEX 01 150", "  INDEX 02 300"))
        assert [idx.number for idx in disc.tracks[0].indices] == [0, 1, 2]

    def test_index_without_time(self) -> None:
        err = _issues(_sheet("TRACK 01 AUDIO", "  INDEX 01"))
        assert err.kinds == {IssueKind.MISSING_INDEX_TIME}


class TestValues:
    @pytest.mark.parametrize(
        "time", ["00:60:00", "00:00:75", "01:99:00"]
    )
    def test_time_out_of_range(self, time: str) -> None:
        err = _issues(_sheet("TRACK 01 AUDIO", f"  INDEX 01 {time}"))
        assert err.kinds == {IssueKind.TIME_RANGE}
        assert time in err.issues[0].message

    def test_pregap_out_of_range(self) -> None:
        err = _issues(_sheet("TRACK 01 AUDIO", "  PREGAP 00:00:80", "  INDEX 01 0"))
        assert err.kinds == {IssueKind.TIME_RANGE}

    @pytest.mark.parametrize(
        "time,component,value",
        [("00:60:00", "seconds", 60), ("02:10:80", "frames", 80)],
    )
    def test_time_issue_names_component(self, time: str, component: str, value: int) -> None:
        err = _issues(_sheet("TRACK 01 AUDIO", f"  INDEX 01 {time}"))
        issue = err.issues[0]
        assert issue.component == component
        assert issue.value == value

    def test_other_issues_have_no_component(self) -> None:
        err = _issues(_sheet("TRACK 01 AUDIO", "INDEX 01 0", header="CATALOG 123\n"))
        assert err.issues[0].component is None
        assert err.issues[0].value is None

    @pytest.mark.parametrize(
        "catalog,kind",
        [
            ("12345", IssueKind.CATALOG_LENGTH),
            ("12345678901234", IssueKind.CATALOG_LENGTH),
            ("12345678901A", IssueKind.CATALOG_CHARACTERS),
        ],
    )
    def test_bad_catalog(self, catalog: str, kind: IssueKind) -> None:
        err = _issues(_sheet("TRACK 01 AUDIO", "INDEX 01 0", header=f"CATALOG {catalog}\n"))
        assert err.kinds == {kind}
        assert err.position.line == 1

    def test_catalog_length_messages(self) -> None:
        short = _issues(_sheet("TRACK 01 AUDIO", "INDEX 01 0", header="CATALOG 123\n"))
        assert "too short" in short.issues[0].message
        long = _issues(_sheet("TRACK 01 AUDIO", "INDEX 01 0", header="CATALOG 12345678901234\n"))
        assert "too long" in long.issues[0].message

    @pytest.mark.parametrize(
        "isrc,kind",
        [
            ("USRC1760783", IssueKind.ISRC_LENGTH),
            ("USRC176078390", IssueKind.ISRC_LENGTH),
            ("12RC17607839", IssueKind.ISRC_FORMAT),
            ("USRC1A607839", IssueKind.ISRC_FORMAT),
            ("usrc17607839", IssueKind.ISRC_FORMAT),
            ("USrc17607839", IssueKind.ISRC_FORMAT),
        ],
    )
    def test_bad_isrc(self, isrc: str, kind: IssueKind) -> None:
        err = _issues(_sheet("TRACK 01 AUDIO", f"  ISRC {isrc}", "  INDEX 01 0"))
        assert err.kinds == {kind}


class TestBatchReporting:
    def test_all_issues_reported_in_order(self) -> None:
        text = _sheet(
            "TRACK 01 AUDIO",
            "  INDEX 01 00:00:00",
            "TRACK 01 AUDIO",
            "  INDEX 01 00:61:00",
            header="CATALOG 123\n",
        )
        err = _issues(text)
        assert [issue.kind for issue in err.issues] == [
            IssueKind.CATALOG_LENGTH,
            IssueKind.DUPLICATE_TRACK,
            IssueKind.TIME_RANGE,
        ]
        assert [issue.position.line for issue in err.issues] == [1, 4, 5]
        assert err.position.line == 1
        assert err.kind is IssueKind.CATALOG_LENGTH

    def test_message_lists_every_issue(self) -> None:
        err = _issues(_sheet("TRACK 02 AUDIO", '  TITLE "x"', header="CATALOG 1\n"))
        message = str(err)
        assert message.startswith("3 semantic error(s)")
        assert "line 1, column 1" in message


class TestStructuralErrors:
    """Trees the grammar never produces, built by hand."""

    @staticmethod
    def _stmt(keyword: str, *args: object, line: int = 1) -> Statement:
        return Statement(keyword=keyword, args=args, line=line, column=1, offset=line * 10)

    def test_track_property_outside_track(self) -> None:
        syntax = SheetSyntax(
            global_statements=[
                self._stmt("CATALOG", "1", line=1),
                self._stmt("FLAGS", "DCP", line=2),
                self._stmt("TITLE", "never reached", line=3),
            ]
        )
        with pytest.raises(CueSemanticError) as exc_info:
            build_disc(syntax)
        err = exc_info.value
        assert [issue.kind for issue in err.issues] == [
            IssueKind.CATALOG_LENGTH,
            IssueKind.TRACK_PROPERTY_OUTSIDE_TRACK,
        ]

    def test_global_only_inside_track(self) -> None:
        syntax = SheetSyntax(
            global_statements=[self._stmt("TITLE", "x")],
            tracks=[
                TrackBlock(
                    command=self._stmt("TRACK", 1, "AUDIO", line=2),
                    statements=[self._stmt("CATALOG", "0123456789012", line=3)],
                )
            ],
        )
        with pytest.raises(CueSemanticError) as exc_info:
            ModelBuilder().build(syntax)
        assert exc_info.value.kinds == {IssueKind.UNEXPECTED_STATEMENT}

    def test_nested_track(self) -> None:
        syntax = SheetSyntax(
            global_statements=[self._stmt("TITLE", "x")],
            tracks=[
                TrackBlock(
                    command=self._stmt("TRACK", 1, "AUDIO", line=2),
                    statements=[self._stmt("TRACK", 2, "AUDIO", line=3)],
                )
            ],
        )
        with pytest.raises(CueSemanticError) as exc_info:
            build_disc(syntax)
        assert exc_info.value.kind is IssueKind.UNEXPECTED_STATEMENT
