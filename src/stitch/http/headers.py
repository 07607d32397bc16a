"""Request headers as an immutable, case-insensitive mapping.

Built once from the ASGI scope's raw byte pairs. Names are folded to
lowercase up front so lookups are plain dict hits.
"""

from collections.abc import Iterator, Mapping


class Headers(Mapping[str, str]):
    """Read-only view of request headers.

    ``headers["If-None-Match"]`` returns the first value sent under that
    name (any case); ``get_list()`` returns every value in arrival order.
    """

    __slots__ = ("_index", "_raw")

    def __init__(self, raw: tuple[tuple[bytes, bytes], ...] = ()) -> None:
        index: dict[str, list[str]] = {}
        for name, value in raw:
            index.setdefault(name.decode("latin-1").lower(), []).append(value.decode("latin-1"))
        self._raw = raw
        self._index = index

    def __getitem__(self, key: str) -> str:
        values = self._index.get(key.lower())
        if not values:
            raise KeyError(key)
        return values[0]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __repr__(self) -> str:
        first = {name: values[0] for name, values in self._index.items()}
        return f"Headers({first!r})"

    def get_list(self, key: str) -> list[str]:
        """Every value sent for *key*, in order (empty if none)."""
        return list(self._index.get(key.lower(), ()))

    @property
    def raw(self) -> tuple[tuple[bytes, bytes], ...]:
        """The original ASGI byte pairs."""
        return self._raw
