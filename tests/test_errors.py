import pytest

from storyscript.storyscript_errors import Diagnostic, ParseError, SourceLocation


def test_source_location_str() -> None:
    assert str(SourceLocation("hall.story", 3, 7)) == "hall.story:3:7"


def test_diagnostic_formats() -> None:
    d = Diagnostic(SourceLocation("hall.story", 3, 7), "Expected room name.")
    assert str(d) == "Error at 3:7 - Expected room name."
    assert d.format_with_file() == "hall.story:3:7: Error: Expected room name."
    assert d.to_dict() == {
        "filename": "hall.story",
        "line": 3,
        "col": 7,
        "message": "Expected room name.",
    }


def test_parse_error_carries_diagnostic() -> None:
    d = Diagnostic(SourceLocation("t.story", 1, 1), "Expected expression.")
    with pytest.raises(ParseError, match="Error at 1:1 - Expected expression.") as e:
        raise ParseError(d)
    assert e.value.diagnostic is d
