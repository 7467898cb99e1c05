"""Tests for splitting scripts into speaker segments and tracks."""

import pytest

from podcast_studio.models.script import Segment, Speaker
from podcast_studio.script.parsing import match_label, parse_script


class TestMatchLabel:
    @pytest.mark.parametrize(
        "line",
        ["[Narrator]: Hi", "NARRATOR: Hi", "[narrator]: Hi", "narrator:Hi", "[NARRATOR]:   Hi"],
    )
    def test_case_and_bracket_variants(self, line):
        assert match_label(line) == (Speaker.NARRATOR, "Hi")

    def test_each_speaker(self):
        assert match_label("[HOST]: a")[0] is Speaker.HOST
        assert match_label("GUEST: b")[0] is Speaker.GUEST

    @pytest.mark.parametrize(
        "line",
        ["HOSTING: no", "[HOST: no", "HOST] : no", "The HOST: said", "[CO-HOST]: no", "HOST - no"],
    )
    def test_non_labels(self, line):
        assert match_label(line) is None


class TestParseScript:
    def test_end_to_end_override_example(self):
        parsed = parse_script("[NARRATOR]: Hello\n[HOST]: Hi\nfollow-up\n[GUEST]: Hey")
        assert parsed.segments == [
            Segment(speaker=Speaker.NARRATOR, text="Hello"),
            Segment(speaker=Speaker.HOST, text="Hi\nfollow-up"),
            Segment(speaker=Speaker.GUEST, text="Hey"),
        ]
        assert parsed.tracks.narrator == "Hello"
        assert parsed.tracks.host == "Hi\nfollow-up"
        assert parsed.tracks.guest == "Hey"

    def test_sample_script(self, sample_script):
        parsed = parse_script(sample_script)
        speakers = [s.speaker for s in parsed.segments]
        assert speakers == [
            Speaker.NARRATOR, Speaker.HOST, Speaker.GUEST, Speaker.HOST, Speaker.GUEST,
            Speaker.NARRATOR, Speaker.HOST, Speaker.GUEST, Speaker.NARRATOR,
        ]
        assert parsed.segments[4].text == (
            "Warming water. It causes bleaching.\nWhen corals get stressed they expel their algae."
        )
        assert parsed.tracks.narrator.split("\n") == [
            "Welcome to Deep Dive, the show that goes beneath the surface.",
            "After the break, what can be done.",
            "Deep Dive will be back next week.",
        ]

    def test_leading_unlabelled_lines_go_to_narrator(self):
        parsed = parse_script("Intro line one\nIntro line two\n[HOST]: Welcome")
        assert parsed.segments[0] == Segment(speaker=Speaker.NARRATOR, text="Intro line one\nIntro line two")
        assert parsed.tracks.narrator == "Intro line one\nIntro line two"
        assert parsed.tracks.host == "Welcome"

    def test_mixed_label_styles_same_speaker(self):
        parsed = parse_script("[Narrator]: a\nNARRATOR: b\n[narrator]: c")
        assert [s.speaker for s in parsed.segments] == [Speaker.NARRATOR] * 3
        assert parsed.tracks.narrator == "a\nb\nc"

    def test_repeated_labels_are_separate_segments(self):
        parsed = parse_script("[HOST]: one\n[HOST]: two")
        assert len(parsed.segments) == 2
        assert parsed.tracks.host == "one\ntwo"

    def test_blank_lines_neither_close_nor_extend(self):
        parsed = parse_script("[GUEST]: first\n\n   \nsecond\n\n[HOST]: third")
        assert parsed.segments[0].text == "first\nsecond"
        assert parsed.tracks.guest == "first\nsecond"

    def test_empty_label_is_state_transition_only(self):
        parsed = parse_script("[NARRATOR]: Intro\n[HOST]:\nActual host line\n[GUEST]:")
        assert parsed.segments == [
            Segment(speaker=Speaker.NARRATOR, text="Intro"),
            Segment(speaker=Speaker.HOST, text="Actual host line"),
            Segment(speaker=Speaker.GUEST, text=""),
        ]
        assert parsed.tracks.host == "Actual host line"
        assert parsed.tracks.guest == ""

    def test_lines_are_stripped(self):
        parsed = parse_script("   [HOST]:   padded   \n    continued  ")
        assert parsed.tracks.host == "padded\ncontinued"

    def test_empty_input(self):
        parsed = parse_script("")
        assert parsed.segments == []
        assert (parsed.tracks.narrator, parsed.tracks.host, parsed.tracks.guest) == ("", "", "")

    def test_reconstruction_per_speaker(self):
        contributions = [
            (Speaker.NARRATOR, "Welcome."),
            (Speaker.HOST, "Hi there."),
            (Speaker.GUEST, "Glad to join."),
            (Speaker.HOST, "Let's begin."),
            (Speaker.NARRATOR, "Meanwhile..."),
            (Speaker.GUEST, "Indeed."),
        ]
        script = "\n".join(f"[{speaker.name}]: {text}" for speaker, text in contributions)
        parsed = parse_script(script)

        for speaker in Speaker:
            expected = [text for s, text in contributions if s is speaker]
            rejoined = [seg.text for seg in parsed.segments if seg.speaker is speaker]
            assert rejoined == expected
            assert parsed.tracks.for_speaker(speaker) == "\n".join(expected)
