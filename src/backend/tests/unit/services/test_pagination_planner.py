"""
Unit tests for the sliding-window pagination planner
"""

import pytest

from catalog_engine.services.pagination.planner import plan_pagination


class TestPlanPagination:

    def test_window_centred_on_current(self):
        plan = plan_pagination(5, 10)

        assert plan.numbers == [3, 4, 5, 6, 7]
        assert plan.show_first and plan.show_last
        assert plan.leading_ellipsis and plan.trailing_ellipsis

    def test_window_shifted_at_left_edge(self):
        plan = plan_pagination(1, 10)

        assert plan.numbers == [1, 2, 3, 4, 5]
        assert not plan.show_first
        assert not plan.leading_ellipsis
        assert plan.show_last and plan.trailing_ellipsis
        assert not plan.prev_enabled
        assert plan.next_enabled

    def test_window_shifted_at_right_edge(self):
        plan = plan_pagination(10, 10)

        assert plan.numbers == [6, 7, 8, 9, 10]
        assert plan.show_first and plan.leading_ellipsis
        assert not plan.show_last
        assert plan.prev_enabled
        assert not plan.next_enabled

    def test_no_ellipsis_when_gap_is_one_page(self):
        plan = plan_pagination(4, 10)

        assert plan.numbers == [2, 3, 4, 5, 6]
        assert plan.show_first
        assert not plan.leading_ellipsis

    def test_fewer_pages_than_window(self):
        plan = plan_pagination(2, 3)

        assert plan.numbers == [1, 2, 3]
        assert not plan.show_first and not plan.show_last

    def test_single_page(self):
        plan = plan_pagination(1, 1)

        assert plan.numbers == [1]
        assert not plan.prev_enabled and not plan.next_enabled

    @pytest.mark.parametrize("total", [1, 2, 4, 5, 6, 13])
    def test_window_width_and_membership(self, total):
        for current in range(1, total + 1):
            plan = plan_pagination(current, total)

            assert len(plan.numbers) == min(5, total)
            assert current in plan.numbers
            assert plan.prev_enabled == (current > 1)
            assert plan.next_enabled == (current < total)
