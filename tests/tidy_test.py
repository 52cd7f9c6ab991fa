import pytest

from etext_segmenter.tidy import tidy, tidy_author, tidy_title


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("  Hello World.  ", "Hello World"),
        ("*** THE END ***", "THE END"),
        ("Title (1994)", "Title"),
        ("Foo\nContents\nbar", "Foo"),
        ("a   b\t c", "a b c"),
        ("Something^M", "Something"),
    ],
)
def test_tidy(raw, expected):
    assert tidy(raw) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Evangeline, by Henry W. Longfellow", "Evangeline"),
        ("The Project Gutenberg Etext of Evangeline, by Henry W. Longfellow", "Evangeline"),
        ("Project Gutenberg's Etext of Hamlet", "Hamlet"),
        ("Alice's Adventures in Wonderland (c) 1991", "Alice's Adventures in Wonderland"),
        ("of The Raven", "The Raven"),
        ("Etext of Moby Dick, or", "Moby Dick"),
        ("Book of Mormon", "Book of Mormon"),
        ("Emma title: Jane", "Emma"),
        ("release of: Emma", "Emma"),
        ("in French of Les Miserables", "Les Miserables"),
    ],
)
def test_tidy_title(raw, expected):
    assert tidy_title(raw) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Henry W. Longfellow", "Henry W. Longfellow"),
        ("by Henry W. Longfellow", "Henry W. Longfellow"),
        ("Jane Doe. All rights reserved", "Jane Doe"),
        ("Jane Doe, Copyright 1995", "Jane Doe"),
        ("the Brothers Grimm", "Brothers Grimm"),
        ("Mark Twain, this is the author's edition", "Mark Twain"),
        ("Jane Austen)", "Jane Austen"),
        ("(Anonymous)", ""),
    ],
)
def test_tidy_author(raw, expected):
    assert tidy_author(raw) == expected


@pytest.mark.parametrize("fn", [tidy, tidy_title, tidy_author])
def test_tidy_functions_are_idempotent_on_examples(fn):
    for raw in ("  *Project Gutenberg Etext of X, by Y*  ", "(c) 1990", "by by by", ""):
        once = fn(raw)
        assert fn(once) == once
