import pytest
from conftest import ETEXT_LINES, paragraphs

from etext_segmenter.metadata import (
    HeaderText,
    author_from_by_line,
    author_from_possession,
    etext_id,
    extract_author,
    extract_description,
    extract_document_metadata,
    extract_language,
    extract_metadata,
    extract_title,
    property_value,
)
from etext_segmenter.models import Metadata
from etext_segmenter.segmenter import segment_lines


def test_title_and_author_from_project_line():
    header = HeaderText.from_text(
        "The Project Gutenberg Etext of Evangeline, by Henry W. Longfellow"
    )
    title = extract_title(header)
    assert title == "Evangeline"
    assert "Henry W. Longfellow" in extract_author(header, title)


def test_property_value_skips_placeholders():
    header = HeaderText.from_text("Title: Title", "Title: Moby Dick")
    assert property_value(header, "title") == "Moby Dick"
    assert property_value(header, "language") is None


def test_title_property_wins_over_project_line():
    header = HeaderText.from_text("Project Gutenberg Etext of Something Else", "Title: Emma")
    assert extract_title(header) == "Emma"


def test_several_authors_is_rejected():
    header = HeaderText.from_text("Authors: Several")
    assert extract_author(header) is None


def test_authors_property_is_accepted():
    assert extract_author(HeaderText.from_text("Authors: Lewis and Clark")) == "Lewis and Clark"


def test_title_after_transition_line():
    header = HeaderText.from_text("Project Gutenberg's Etext of:", "The Raven")
    assert extract_title(header) == "The Raven"


def test_title_continues_on_next_line():
    header = HeaderText.from_text(
        "Project Gutenberg Etext of The Life and\nAdventures of Robinson Crusoe"
    )
    assert extract_title(header) == "The Life and Adventures of Robinson Crusoe"


def test_possession_gives_the_author():
    header = HeaderText.from_text("Project Gutenberg Etext of Shakespeare's First Folio")
    assert author_from_possession(header) == "Shakespeare"
    assert extract_author(header, extract_title(header)) == "Shakespeare"


def test_everybody_is_not_an_author():
    header = HeaderText.from_text("Project Gutenberg Etext of Everybody's Guide")
    assert author_from_possession(header) is None


def test_by_property_wins_over_possession():
    header = HeaderText.from_text(
        "Project Gutenberg Etext of Gulliver's Travels", "By Jonathan Swift"
    )
    assert extract_author(header, extract_title(header)) == "Jonathan Swift"


def test_possession_after_rejected_by():
    header = HeaderText.from_text("Project Gutenberg Etext of Travels, by Cook's Crew")
    assert author_from_possession(header) is None
    header = HeaderText.from_text("Project Gutenberg Etext of Cook's Voyages, by Himself")
    assert author_from_possession(header) is None


def test_by_line_in_header_block():
    header = HeaderText.from_text("Project Gutenberg Etext of Emma\nby Jane Austen")
    assert author_from_by_line(header) == "Jane Austen"


def test_author_on_line_after_trailing_by():
    header = HeaderText.from_text("Project Gutenberg Etext of Emma\nWritten by\nJane Austen")
    assert author_from_by_line(header) == "Jane Austen"


def test_used_by_is_not_a_byline():
    header = HeaderText.from_text(
        "Project Gutenberg Etext of Emma\nThis etext is used by permission"
    )
    assert author_from_by_line(header) is None


def test_by_property_extends_partial_author():
    header = HeaderText.from_text(
        "Project Gutenberg Etext of Hamlet, by Shakespeare", "By William Shakespeare"
    )
    assert extract_author(header, "Hamlet") == "William Shakespeare"


def test_edited_by_outside_boilerplate():
    header = HeaderText.from_text("Project Gutenberg Etext of Poems", "Poems edited by Ann Smith")
    assert extract_author(header, "Poems") == "Ann Smith"


def test_description_skips_file_and_copyright_lines():
    header = HeaderText.from_text(
        "**Project Gutenberg Etext of Foo**\n"
        "*This file should be named foo10.txt*\n"
        "Copyright laws are changing"
    )
    assert extract_description(header) == "Project Gutenberg Etext of Foo"


def test_language_is_property_only():
    assert extract_language(HeaderText.from_text("Language: French")) == "French"
    assert extract_language(HeaderText.from_text("Written in French")) is None


def test_document_without_project_name_has_no_metadata():
    blocks = paragraphs("It was a dark and stormy night.", "Title: Not Really", "The end.")
    metadata = extract_document_metadata(blocks)
    assert metadata == Metadata()
    assert metadata.is_empty()


def test_document_metadata_end_to_end():
    _, blocks = segment_lines(ETEXT_LINES)
    metadata = extract_document_metadata(blocks)
    assert metadata.title == "Evangeline"
    assert metadata.author == "Henry W. Longfellow"
    assert metadata.language == "English"
    assert metadata.description.startswith("The Project Gutenberg Etext of Evangeline")


def test_extract_metadata_logs_found_fields(caplog):
    with caplog.at_level("INFO", logger="etext_segmenter.metadata"):
        extract_metadata(paragraphs("Language: Latin"))
    assert "metadata fields found: language" in caplog.text


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("test12a.txt", "test-a"),
        ("evang10.txt", "evang"),
        ("/texts/alice30.txt", "alice"),
        ("book1.txt", "book"),
        ("plain.txt", "plain"),
        ("2city12", "2city"),
    ],
)
def test_etext_id(filename, expected):
    assert etext_id(filename) == expected
