"""Unit tests for chunking: coverage without gaps, boundary preference, termination."""
import pytest
from pydantic import ValidationError

from caselens.analysis.chunking import estimate_tokens, iter_chunks, line_number_at, split_into_chunks
from caselens.analysis.errors import ChunkingError
from caselens.analysis.schemas import ProcessingOptions
from caselens.analysis.settings import ProcessingSettings


def _assert_full_coverage(text: str, chunks) -> None:
    assert chunks[0].start == 0
    for ch in chunks:
        assert text[ch.start : ch.end] == ch.text
        assert len(ch.text) > 0
    for prev, nxt in zip(chunks, chunks[1:]):
        assert nxt.start <= prev.end, "gap between chunks"
        assert nxt.start > prev.start, "cursor did not advance"
    assert chunks[-1].end == len(text)


def test_short_text_is_one_chunk():
    text = "Client called on Monday. Agent resolved issue on Tuesday."
    chunks = split_into_chunks(text, ProcessingOptions(max_chunk_size=8000, overlap_size=800))
    assert len(chunks) == 1
    assert chunks[0].text == text
    assert chunks[0].start == 0


def test_text_exactly_at_budget_is_one_chunk():
    text = "x" * 100
    chunks = split_into_chunks(text, ProcessingOptions(max_chunk_size=100, overlap_size=10))
    assert [c.text for c in chunks] == [text]


def test_empty_text_has_no_chunks():
    assert split_into_chunks("", ProcessingOptions()) == []


def test_prefers_paragraph_break_past_midpoint():
    text = "a" * 70 + "\n\n" + "b" * 100
    chunks = split_into_chunks(text, ProcessingOptions(max_chunk_size=100, overlap_size=5))
    assert chunks[0].text == "a" * 70
    _assert_full_coverage(text, chunks)


def test_prefers_sentence_end_past_midpoint():
    text = "First sentence is fairly long here. " * 2 + "tail " * 30
    chunks = split_into_chunks(text, ProcessingOptions(max_chunk_size=100, overlap_size=5))
    assert chunks[0].text.endswith(".")
    assert chunks[0].text == text[: text.rfind(". ", 0, 100) + 1]
    _assert_full_coverage(text, chunks)


def test_break_before_midpoint_is_ignored():
    text = "Short. " + "x" * 300
    chunks = split_into_chunks(text, ProcessingOptions(max_chunk_size=100, overlap_size=10))
    assert len(chunks[0].text) == 100
    _assert_full_coverage(text, chunks)


def test_overlap_between_consecutive_chunks():
    text = "y" * 250
    chunks = split_into_chunks(text, ProcessingOptions(max_chunk_size=100, overlap_size=20))
    assert [c.start for c in chunks] == [0, 80, 160]
    assert chunks[0].text[-20:] == chunks[1].text[:20]
    _assert_full_coverage(text, chunks)


@pytest.mark.parametrize("size,overlap", [(50, 0), (64, 8), (100, 49), (333, 100)])
def test_coverage_on_mixed_text(size, overlap):
    text = ("The client phoned support. " * 7 + "\n\n" + "Agent followed up by email. " * 5) * 6
    chunks = split_into_chunks(text, ProcessingOptions(max_chunk_size=size, overlap_size=overlap))
    _assert_full_coverage(text, chunks)
    assert all(len(c.text) <= size for c in chunks)
    assert [c.index for c in chunks] == list(range(len(chunks)))


def test_overlap_at_least_chunk_length_raises_instead_of_looping():
    text = "a" * 60 + "\n\n" + "b" * 200
    with pytest.raises(ChunkingError):
        split_into_chunks(text, ProcessingOptions(max_chunk_size=100, overlap_size=70))


def test_iter_chunks_is_lazy():
    text = "a" * 60 + "\n\n" + "b" * 200
    it = iter_chunks(text, ProcessingOptions(max_chunk_size=100, overlap_size=70))
    first = next(it)
    assert first.text == "a" * 60
    with pytest.raises(ChunkingError):
        next(it)


@pytest.mark.parametrize("size,overlap", [(0, 0), (10, -1)])
def test_invalid_options_rejected(size, overlap):
    with pytest.raises(ValidationError):
        ProcessingOptions(max_chunk_size=size, overlap_size=overlap)


@pytest.mark.parametrize("size,overlap", [(100, 100), (100, 150)])
def test_overlap_not_smaller_than_chunk_is_config_error(size, overlap):
    with pytest.raises(ChunkingError) as exc:
        ProcessingOptions(max_chunk_size=size, overlap_size=overlap)
    assert exc.value.code == "CHUNKING_CONFIG"


def test_overlap_config_error_from_settings():
    settings = ProcessingSettings(max_tokens_per_chunk=100, overlap_tokens=100)
    with pytest.raises(ChunkingError):
        ProcessingOptions.from_settings(settings)


def test_options_are_immutable():
    opts = ProcessingOptions()
    with pytest.raises(ValidationError):
        opts.max_chunk_size = 10


def test_line_number_at():
    text = "one\ntwo\nthree"
    assert line_number_at(text, 0) == 1
    assert line_number_at(text, 4) == 2
    assert line_number_at(text, len(text)) == 3


def test_estimate_tokens():
    assert estimate_tokens("") == 1
    assert estimate_tokens("abcd" * 10) == 10
