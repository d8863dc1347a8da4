import pytest

from src.encparams.tokenizer import MAX_TOKEN_LENGTH, iter_tokens, read_tokens


def test_whitespace_delimited_tokens_in_order() -> None:
    text = "-width 176\n\t-height   144\r\n-f 29.97"
    assert read_tokens(text) == ["-width", "176", "-height", "144", "-f", "29.97"]


def test_quoted_token_keeps_commas_and_spaces() -> None:
    assert read_tokens('-of "a, b" -qp 30') == ["-of", "a, b", "-qp", "30"]


def test_quoted_token_stops_at_newline_without_closing_quote() -> None:
    assert read_tokens('-of "out file\n-qp 30') == ["-of", "out file", "-qp", "30"]


def test_empty_quotes_end_the_stream() -> None:
    assert read_tokens('-qp 30 "" -width 64') == ["-qp", "30"]


@pytest.mark.parametrize(
    "text",
    [
        "",
        "   \n\t  \n",
        "; only a comment\n",
        ";first\n   ;second line -width 8\n\n",
    ],
)
def test_comment_and_whitespace_only_sources_are_empty(text: str) -> None:
    assert read_tokens(text) == []


def test_comment_discards_rest_of_line_only() -> None:
    text = "-width 176 ; -height 1\n-height 144 ;trailing"
    assert read_tokens(text) == ["-width", "176", "-height", "144"]


def test_semicolon_inside_token_is_not_a_comment() -> None:
    assert read_tokens("-of out;put") == ["-of", "out;put"]


def test_overlong_run_is_split_at_max_length() -> None:
    run = "x" * (MAX_TOKEN_LENGTH + 5)
    tokens = read_tokens(run)
    assert [len(token) for token in tokens] == [MAX_TOKEN_LENGTH, 5]


def test_iter_tokens_is_lazy() -> None:
    iterator = iter_tokens("-a 1 -b 2")
    assert next(iterator) == "-a"
    assert next(iterator) == "1"
