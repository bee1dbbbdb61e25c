import pytest

from pmx.errors import PathError
from pmx.utils.names import validate_profile_name


@pytest.mark.parametrize(
    "name",
    ["valid_name", "valid-name", "valid123", "design/plan", "category/subcategory/name", "x" * 255],
)
def test_accepts_valid_names(name):
    assert validate_profile_name(name) == name


@pytest.mark.parametrize(
    "name",
    [
        "",
        "../x",
        "a\\b",
        "x" * 256,
        "a//b",
        "./a",
        "a/.",
        "invalid/",
        "/invalid",
        "invalid<name",
        'quote"name',
        "pipe|name",
        "star*",
        "question?",
        "colon:name",
        "tab\tname",
        "bell\x07",
        "del\x7f",
    ],
)
def test_rejects_unsafe_names(name):
    with pytest.raises(PathError):
        validate_profile_name(name)


def test_double_dot_inside_a_segment_is_rejected():
    with pytest.raises(PathError, match=r"'\.\.'"):
        validate_profile_name("notes..old")


def test_single_dot_inside_a_segment_is_allowed():
    assert validate_profile_name("v1.2/release") == "v1.2/release"
