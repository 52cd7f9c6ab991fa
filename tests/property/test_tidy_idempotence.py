from functools import reduce
from typing import Callable, TypeVar

from hypothesis import given, settings, strategies as st

from etext_segmenter.tidy import tidy, tidy_author, tidy_title

T = TypeVar("T")


def _apply(times: int, fn: Callable[[T], T], value: T) -> T:
    return reduce(lambda acc, _: fn(acc), range(times), value)


alphabet = st.characters(whitelist_categories=("Ll", "Lu", "Nd", "Zs", "Po", "Ps", "Pe", "Pd"))
fragments = st.sampled_from(
    [
        "Project Gutenberg",
        "Etext of ",
        " by ",
        "Title: ",
        "Author: ",
        "(c)",
        "Copyright 1998",
        "\ncontents",
        "the ",
        "*",
    ]
)
headerish = st.lists(st.one_of(st.text(alphabet=alphabet, max_size=20), fragments), max_size=8).map(
    "".join
)


@given(headerish)
@settings(deadline=None)
def test_tidy_idempotent(sample: str) -> None:
    assert _apply(2, tidy, sample) == tidy(sample)


@given(headerish)
@settings(deadline=None)
def test_tidy_title_idempotent(sample: str) -> None:
    assert _apply(2, tidy_title, sample) == tidy_title(sample)


@given(headerish)
@settings(deadline=None)
def test_tidy_author_idempotent(sample: str) -> None:
    assert _apply(2, tidy_author, sample) == tidy_author(sample)
