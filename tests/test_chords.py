import pytest

from tabsong.chords import ChordPosition, find_chords, strip_chords

# ---------------------------------------------------------------------------
# find_chords
# ---------------------------------------------------------------------------


def test_find_chords_columns():
    assert find_chords("G       D") == [ChordPosition("G", 0), ChordPosition("D", 8)]


def test_find_chords_leading_spaces():
    assert find_chords("    Am") == [ChordPosition("Am", 4)]


@pytest.mark.parametrize(
    "symbol",
    ["A", "Bb", "F#", "Am", "Cmaj7", "Dmin", "Gaug", "Bdim", "E+", "B°", "CM7",
     "C#m7b5", "G7#9", "Asus4", "Dsus2", "Cadd9", "D/F#", "G/B", "Ebmaj7", "Asus2/E"],
)
def test_find_chords_whole_symbol(symbol):
    assert find_chords(symbol) == [ChordPosition(symbol, 0)]


def test_find_chords_order_of_appearance():
    names = [c.name for c in find_chords("Em   C   G/B   D")]
    assert names == ["Em", "C", "G/B", "D"]


def test_find_chords_none():
    assert find_chords("hello there, my friend") == []
    assert find_chords("") == []


def test_find_chords_matches_inside_words():
    # No word boundaries: a capital A-G anywhere is a candidate
    assert find_chords("Be") == [ChordPosition("B", 0)]
    assert find_chords("Dance")[0] == ChordPosition("D", 0)


def test_chord_position_end():
    assert ChordPosition("D/F#", 8).end == 12


# ---------------------------------------------------------------------------
# strip_chords
# ---------------------------------------------------------------------------


def test_strip_chords_leaves_whitespace():
    line = "G   D   Em"
    assert strip_chords(line, find_chords(line)).strip() == ""


def test_strip_chords_keeps_other_text():
    line = "Am  C  (x2)"
    assert strip_chords(line, find_chords(line)).strip() == "(x2)"


def test_strip_chords_order_independent():
    line = "Am  C  G"
    chords = find_chords(line)
    assert strip_chords(line, list(reversed(chords))) == strip_chords(line, chords)


def test_strip_chords_does_not_touch_input():
    line = "C  G"
    strip_chords(line, find_chords(line))
    assert line == "C  G"
