"""Tests for stitch.__init__ — lazy imports cover every public name."""

import pytest

import stitch


@pytest.mark.parametrize("name", stitch.__all__)
def test_all_names_resolve(name: str) -> None:
    obj = getattr(stitch, name)
    assert obj is not None, f"stitch.{name} resolved to None"


def test_unknown_name_raises_attribute_error() -> None:
    with pytest.raises(AttributeError, match="no attribute"):
        stitch.__getattr__("ThisDoesNotExist")


def test_version() -> None:
    assert stitch.__version__ == "0.1.0"
