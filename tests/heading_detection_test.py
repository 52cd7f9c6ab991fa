import pytest

from etext_segmenter.heading_detection import (
    LineClassifier,
    ProseLineClassifier,
    classify_heading,
    is_break,
    is_page_number,
)
from etext_segmenter.models import HeadingKind


@pytest.mark.parametrize(
    "text, kind",
    [
        ("CHAPTER I", HeadingKind.CHAPTER),
        ("Chapter 12", HeadingKind.CHAPTER),
        ("chapter twenty-one", HeadingKind.CHAPTER),
        ("BOOK THE FIRST", HeadingKind.BOOK),
        ("The Third Part", HeadingKind.PART),
        ("ACT III", HeadingKind.ACT),
        ("CONTENTS", HeadingKind.CONTENTS),
        ("Table of Contents", HeadingKind.CONTENTS),
        ("Preface.", HeadingKind.PREFACE),
        ("THE OLD MAN AND THE SEA", HeadingKind.SUB),
        ("Evangeline", HeadingKind.TITLE),
        ("The Fall of the House of Usher", HeadingKind.TITLE),
        ("it was a dark and stormy night", HeadingKind.NONE),
        ("Chapter idle", HeadingKind.NONE),
        ("It Ended Well.", HeadingKind.NONE),
        ("   ", HeadingKind.NONE),
    ],
)
def test_classify_heading(text, kind):
    assert classify_heading(text) is kind


@pytest.mark.parametrize(
    "text, expected",
    [
        ("* * *", True),
        ("----------", True),
        ("  =====  ", True),
        ("--", False),
        ("a---", False),
        ("", False),
    ],
)
def test_is_break(text, expected):
    assert is_break(text) is expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("12", True),
        ("[12]", True),
        ("- 12 -", True),
        ("Page 7", True),
        ("xiv", True),
        ("XIV", False),
        ("I", False),
        ("12345", False),
        ("hello", False),
        ("", False),
    ],
)
def test_is_page_number(text, expected):
    assert is_page_number(text) is expected


def test_prose_classifier_satisfies_protocol():
    classifier = ProseLineClassifier()
    assert isinstance(classifier, LineClassifier)
    assert classifier.classify_heading("PREFACE") is HeadingKind.PREFACE
    assert classifier.is_break("*****")
    assert classifier.is_page_number("33")
