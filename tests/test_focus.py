import unittest
from types import SimpleNamespace

from id3tui.focus import BUTTON, FIELD, FILES, FocusController, FocusTarget

FIELDS = 4
BUTTONS = 2


class TestBrowserRing(unittest.TestCase):
    def setUp(self):
        self.session = SimpleNamespace(focus_index=0)
        self.focus = FocusController(self.session, browser_visible=True)

    def test_size_includes_file_list(self):
        self.assertEqual(self.focus.size(FIELDS, BUTTONS), 7)

    def test_initial_target_is_file_list(self):
        self.assertEqual(self.focus.target(FIELDS, BUTTONS), FocusTarget(FILES))

    def test_tab_order(self):
        seen = [self.focus.advance(FIELDS, BUTTONS) for _ in range(7)]
        self.assertEqual(seen, [
            FocusTarget(FIELD, 0), FocusTarget(FIELD, 1), FocusTarget(FIELD, 2), FocusTarget(FIELD, 3),
            FocusTarget(BUTTON, 0), FocusTarget(BUTTON, 1), FocusTarget(FILES),
        ])
        self.assertEqual(self.session.focus_index, 0)

    def test_n_tabs_return_to_start_from_any_position(self):
        for start in range(7):
            self.session.focus_index = start
            for _ in range(7):
                self.focus.advance(FIELDS, BUTTONS)
            self.assertEqual(self.session.focus_index, start)

    def test_backtab_from_zero_wraps(self):
        self.assertEqual(self.focus.retreat(FIELDS, BUTTONS), FocusTarget(BUTTON, 1))
        self.assertEqual(self.session.focus_index, 6)

    def test_backtab_undoes_tab(self):
        self.focus.advance(FIELDS, BUTTONS)
        self.focus.advance(FIELDS, BUTTONS)
        self.assertEqual(self.focus.retreat(FIELDS, BUTTONS), FocusTarget(FIELD, 0))

    def test_focus_first_field(self):
        self.session.focus_index = 5
        self.assertEqual(self.focus.focus_first_field(), FocusTarget(FIELD, 0))
        self.assertEqual(self.session.focus_index, 1)
        self.assertEqual(self.focus.target(FIELDS, BUTTONS), FocusTarget(FIELD, 0))

    def test_ring_follows_live_counts(self):
        self.session.focus_index = 5
        self.assertEqual(self.focus.target(FIELDS, BUTTONS), FocusTarget(BUTTON, 0))
        # With a single button, position 5 is the last slot and Tab wraps to the file list
        self.assertEqual(self.focus.advance(FIELDS, 1), FocusTarget(FILES))


class TestDirectRing(unittest.TestCase):
    def setUp(self):
        self.session = SimpleNamespace(focus_index=0)
        self.focus = FocusController(self.session, browser_visible=False)

    def test_size_without_file_list(self):
        self.assertEqual(self.focus.size(FIELDS, BUTTONS), 6)

    def test_position_zero_is_first_field(self):
        self.assertEqual(self.focus.target(FIELDS, BUTTONS), FocusTarget(FIELD, 0))

    def test_wraps_both_ways(self):
        for _ in range(6):
            self.focus.advance(FIELDS, BUTTONS)
        self.assertEqual(self.session.focus_index, 0)
        self.assertEqual(self.focus.retreat(FIELDS, BUTTONS), FocusTarget(BUTTON, 1))
        self.assertEqual(self.session.focus_index, 5)

    def test_focus_first_field(self):
        self.session.focus_index = 3
        self.focus.focus_first_field()
        self.assertEqual(self.session.focus_index, 0)


if __name__ == '__main__':
    unittest.main()
