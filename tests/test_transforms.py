import pytest

from content_manager.transforms import apply_transforms


def test_find_replace_all_occurrences():
    result = apply_transforms("cat", find="a", replace="b")

    assert result.content == "cbt"
    assert result.modified
    assert result.changes == ['Replaced "a" with "b"']


def test_find_replace_is_literal_and_non_overlapping():
    assert apply_transforms("aaaa", find="aa", replace="b").content == "bb"
    assert apply_transforms("a.c abc", find=".", replace="-").content == "a-c abc"


def test_missing_target_is_not_an_error():
    result = apply_transforms("dog", find="a", replace="b")

    assert result.content == "dog"
    assert not result.modified
    assert result.warnings == ['Text "a" not found in file']


def test_replace_with_same_text_changes_nothing():
    result = apply_transforms("cat", find="a", replace="a")

    assert not result.modified
    assert result.warnings == []


def test_replace_with_empty_string_deletes():
    assert apply_transforms("c-a-t", find="-", replace="").content == "cat"


def test_find_without_replace_is_ignored():
    result = apply_transforms("cat", find="a")

    assert result.content == "cat"
    assert not result.modified


@pytest.mark.parametrize("kwargs, expected", [
    ({"append": "!"}, "hi!"),
    ({"prepend": ">> "}, ">> hi"),
    ({"find": "h", "replace": "H", "append": "!", "prepend": ">> "}, ">> Hi!"),
])
def test_transform_order(kwargs, expected):
    result = apply_transforms("hi", **kwargs)

    assert result.content == expected
    assert result.modified


def test_prepend_applies_after_replace():
    # a prefix containing the search text is not itself replaced
    assert apply_transforms("x", find="x", replace="y", prepend="x").content == "xy"


def test_empty_append_and_prepend_are_ignored():
    result = apply_transforms("hi", append="", prepend="")

    assert result.content == "hi"
    assert not result.modified


def test_no_transforms():
    result = apply_transforms("hi")

    assert result.content == "hi"
    assert result.changes == [] and result.warnings == []
