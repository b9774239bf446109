from __future__ import annotations

import pytest

from iiif_image_core.errors import InvalidParameter
from iiif_image_core.validators import FORMATS, KINDS, QUALITIES, is_valid, validate

ACCEPTED = {
    "region": ["full", "square", "pct:10,10,50,50", "pct:0.5,1,99.75,100", "0,0,100,100", "10,20,30,40"],
    "size": ["full", "max", "pct:50", "pct:12.5", "150,", ",150", "150,75", "!150,75"],
    "rotation": ["0", "90", "22.5", "!0", "!180", "360"],
    "quality": ["color", "gray", "bitonal", "default"],
    "format": ["jpg", "tif", "gif", "png", "webp"],
}

REJECTED = {
    "region": [
        "",
        "abc",
        "Full",
        " full",
        "full ",
        "pct:10,10,50",
        "pct:1.,2,3,4",
        "10,10,10",
        "-1,0,10,10",
        "1.5,0,10,10",
        "0,0,100,100,",
    ],
    "size": ["", "-5,", "!50,", "pct:", "pct:-5", "1.5,", "max,", ",", "50,50,50", "!!50,50", "١٠,"],
    "rotation": ["", "x", "-90", "!!90", "90!", "90.", "+90", "!"],
    "quality": ["", "purple", "Color", "grey", "default "],
    "format": ["", "bmp", "jpeg", "JPG", ".png", "png "],
}


@pytest.mark.parametrize("kind,value", [(k, v) for k, values in ACCEPTED.items() for v in values])
def test_accepts_grammar_members(kind: str, value: str) -> None:
    assert validate(kind, value) is True
    # Validation is a pure function of the input
    assert validate(kind, value) is True


@pytest.mark.parametrize("kind,value", [(k, v) for k, values in REJECTED.items() for v in values])
def test_rejects_non_members_with_kind_and_value(kind: str, value: str) -> None:
    for _ in range(2):
        with pytest.raises(InvalidParameter) as excinfo:
            validate(kind, value)
        assert excinfo.value.kind == kind
        assert excinfo.value.value == value
        assert f"Invalid {kind}" in str(excinfo.value)


def test_is_valid_never_raises_for_known_kinds():
    assert is_valid("size", "pct:50")
    assert not is_valid("size", "pct:abc")
    assert not is_valid("region", None)


def test_unknown_kind_is_a_programming_error():
    with pytest.raises(ValueError, match="Unknown parameter kind"):
        validate("identifier", "abc")


def test_public_constants():
    assert QUALITIES == ("color", "gray", "bitonal", "default")
    assert FORMATS == ("jpg", "tif", "gif", "png", "webp")
    assert set(KINDS) == {"region", "size", "rotation", "quality", "format"}
