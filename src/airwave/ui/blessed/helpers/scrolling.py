"""Pure helpers for keeping a selection visible in a scrolling list."""


def calculate_scroll_offset(
    selected: int,
    current_scroll: int,
    visible_items: int,
    total_items: int,
) -> int:
    """Scroll offset that keeps `selected` inside a window of `visible_items` rows.

    Examples:
        >>> calculate_scroll_offset(selected=15, current_scroll=0, visible_items=10, total_items=20)
        6
        >>> calculate_scroll_offset(selected=2, current_scroll=10, visible_items=10, total_items=20)
        2
    """
    if visible_items <= 0 or total_items <= visible_items:
        return 0

    if selected >= current_scroll + visible_items:
        offset = selected - visible_items + 1
    elif selected < current_scroll:
        offset = selected
    else:
        offset = current_scroll

    # Never scroll past the last full page
    return max(0, min(offset, total_items - visible_items))


def move_selection(current: int, delta: int, total_items: int, wrap: bool = False) -> int:
    """Move a selection index by `delta`, clamping (or wrapping) at the ends."""
    if total_items == 0:
        return 0
    if wrap:
        return (current + delta) % total_items
    return max(0, min(current + delta, total_items - 1))
