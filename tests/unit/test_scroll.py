"""Unit tests for scroll-window math."""

from __future__ import annotations

import pytest

from lazydbm.shared.ui.scroll import (
    SCROLL_END,
    ScrollState,
    fit_widths,
    follow_window,
    scroll_by,
    window,
)


class TestWindow:
    @pytest.mark.parametrize("total", [0, 1, 5, 20])
    @pytest.mark.parametrize("viewport", [0, 1, 3, 25])
    @pytest.mark.parametrize("offset", [-4, 0, 2, 19, 500])
    def test_window_stays_in_bounds(self, total: int, viewport: int, offset: int) -> None:
        start, end = window(total, viewport, offset)
        assert 0 <= start <= end <= total
        assert end - start <= viewport

    def test_offset_past_end_matches_max_offset(self) -> None:
        assert window(20, 5, 10_000) == window(20, 5, 15) == (15, 20)

    def test_scroll_end_sentinel_clamps(self) -> None:
        assert window(7, 3, SCROLL_END) == (4, 7)

    def test_viewport_larger_than_total(self) -> None:
        assert window(3, 10, 2) == (0, 3)


class TestFollowWindow:
    def test_selection_inside_first_page(self) -> None:
        assert follow_window(30, 10, 4) == (0, 10)

    def test_selection_pinned_to_last_row(self) -> None:
        assert follow_window(30, 10, 12) == (3, 13)

    def test_zero_viewport(self) -> None:
        assert follow_window(30, 0, 12) == (0, 0)


class TestScrollBy:
    def test_saturates_at_zero(self) -> None:
        assert scroll_by(3, -10) == 0

    def test_forward_is_unbounded(self) -> None:
        assert scroll_by(3, 10) == 13


class TestFitWidths:
    def test_all_columns_fit(self) -> None:
        assert fit_widths([20, 14, 3, 20, 3], 100, 0) == (0, 5)

    def test_narrow_area_shows_one_column(self) -> None:
        assert fit_widths([20, 14, 3, 20, 3], 5, 0) == (0, 1)

    def test_start_clamped_so_last_column_reachable(self) -> None:
        start, end = fit_widths([20, 14, 3, 20, 3], 30, SCROLL_END)
        assert (start, end) == (2, 5)

    def test_empty(self) -> None:
        assert fit_widths([], 10, 2) == (0, 0)


class TestScrollState:
    def test_reverse_step_after_jump_to_end(self) -> None:
        state = ScrollState()
        state.jump_rows(to_end=True)
        state.scroll_rows(-1, total=50)
        assert state.row == 48

    def test_columns_saturate(self) -> None:
        state = ScrollState()
        state.scroll_columns(-5, total=3)
        assert state.column == 0

    def test_reset(self) -> None:
        state = ScrollState(row=4, column=2)
        state.reset()
        assert (state.row, state.column) == (0, 0)
