import pytest

from tapguard.core.exceptions import PredicateSyntaxError
from tapguard.validator.predicate import OP_CONTAINS, OP_EQUALS, parse_predicate


def test_parse_contains_is_case_insensitive():
    predicate = parse_predicate('Label contains "LOG"')
    assert predicate.field == "label"
    assert predicate.operator == OP_CONTAINS
    assert predicate.value == "log"


def test_parse_equals_accepts_single_quotes():
    predicate = parse_predicate("identifier=='login-button'")
    assert predicate.operator == OP_EQUALS
    assert predicate.value == "login-button"


def test_matches_compares_lowercased(make_element):
    element = make_element(label="Log In", identifier="Login-Button")
    assert parse_predicate('label CONTAINS "log"').matches(element)
    assert parse_predicate('identifier == "LOGIN-BUTTON"').matches(element)
    assert not parse_predicate('title == "log in"').matches(element)


@pytest.mark.parametrize(
    "text",
    [
        'label LIKE "x"',
        'name == "x"',
        'label CONTAINS "x" AND value == "y"',
        'label == "unterminated',
        'label == ""',
        'label ==',
        "label == x",
        '"x" == label',
    ],
)
def test_unsupported_syntax_is_rejected(text):
    with pytest.raises(PredicateSyntaxError) as exc:
        parse_predicate(text)
    assert exc.value.predicate == text
    assert exc.value.position >= 0
