"""Test utilities for stitch applications.

Provides an in-process test client and page shell assertions::

    from stitch.testing import TestClient, assert_shell_applied
"""

from stitch.testing.assertions import (
    assert_shell_applied,
    assert_shell_skipped,
    assert_stamped,
    header_values,
)
from stitch.testing.client import TestClient

__all__ = [
    "TestClient",
    "assert_shell_applied",
    "assert_shell_skipped",
    "assert_stamped",
    "header_values",
]
