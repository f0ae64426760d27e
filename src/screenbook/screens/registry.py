"""Id-indexed view over one loaded screen snapshot."""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from screenbook.screens.types import Screen


class ScreenRegistry:
    """Holds the screens of one run and answers id lookups in O(1).

    Construction neither validates nor deduplicates. With duplicate ids the
    last screen wins on lookup, while iteration still yields every screen
    in input order.
    """

    def __init__(self, screens: Sequence[Screen]):
        self._screens: tuple[Screen, ...] = tuple(as_screen_list(screens))
        self._by_id: dict[str, Screen] = {s.id: s for s in self._screens}

    def has(self, screen_id: str) -> bool:
        return screen_id in self._by_id

    def get(self, screen_id: str) -> Screen | None:
        """Get a screen by id, or None if unknown."""
        return self._by_id.get(screen_id)

    @property
    def ids(self) -> frozenset[str]:
        return frozenset(self._by_id)

    @property
    def screens(self) -> tuple[Screen, ...]:
        return self._screens

    def __contains__(self, screen_id: object) -> bool:
        return screen_id in self._by_id

    def __iter__(self) -> Iterator[Screen]:
        return iter(self._screens)

    def __len__(self) -> int:
        return len(self._screens)


def as_screen_list(screens: ScreenRegistry | Sequence[Screen]) -> list[Screen]:
    """Normalize the ``screens`` argument accepted by every analysis function.

    Raises:
        TypeError: If ``screens`` is not a registry or a sequence of Screen.
    """
    if isinstance(screens, ScreenRegistry):
        return list(screens.screens)
    if isinstance(screens, (str, bytes)) or not isinstance(screens, Sequence):
        raise TypeError(
            f"screens must be a sequence of Screen, got {type(screens).__name__}"
        )
    for item in screens:
        if not isinstance(item, Screen):
            raise TypeError(f"expected Screen, got {type(item).__name__}")
    return list(screens)
