"""Shell assertion helpers for stitch tests.

Convenience functions to verify what the page shell did to a response.
Each assertion produces a clear error message on failure.
"""

from stitch.http.response import Response
from stitch.shell.freshness import Freshness


def header_values(response: Response, name: str) -> list[str]:
    """Every value of header *name* (case-insensitive), in order."""
    lowered = name.lower()
    return [value for key, value in response.headers if key.lower() == lowered]


def assert_shell_applied(
    response: Response, *, marker: tuple[str, str] = ("X-Stitch-Injected", "1")
) -> None:
    """Assert the response went through the shell exactly once."""
    name, value = marker
    values = header_values(response, name)
    assert values == [value], f"Expected {name}: {value} once, got {values!r}"
    assert response.has_header("Last-Modified"), "Shell response has no Last-Modified"


def assert_shell_skipped(
    response: Response, *, marker: tuple[str, str] = ("X-Stitch-Injected", "1")
) -> None:
    """Assert the response was passed through without shell headers."""
    name, _ = marker
    assert not response.has_header(name), (
        f"Response unexpectedly carries {name}.\nHeaders: {response.headers!r}"
    )


def assert_stamped(response: Response, freshness: Freshness) -> None:
    """Assert the captured instant landed in the head meta tag."""
    expected = f'content="{freshness.iso_instant}"'
    assert expected in response.text, (
        f"Page does not carry {expected}.\nResponse body: {response.text[:500]}"
    )
