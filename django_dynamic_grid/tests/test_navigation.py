from django.test import SimpleTestCase

from django_dynamic_grid.grid import navigation
from django_dynamic_grid.grid.navigation import KeyEvent


class NavigationTests(SimpleTestCase):

    def test_arrows_clamp(self):
        self.assertEqual(navigation.arrow_target(0, 0, 'ArrowUp', 3, 3), (0, 0))
        self.assertEqual(navigation.arrow_target(0, 0, 'ArrowLeft', 3, 3), (0, 0))
        self.assertEqual(navigation.arrow_target(2, 2, 'ArrowDown', 3, 3), (2, 2))
        self.assertEqual(navigation.arrow_target(2, 2, 'ArrowRight', 3, 3), (2, 2))
        self.assertEqual(navigation.arrow_target(1, 1, 'ArrowDown', 3, 3), (2, 1))

    def test_tab_walks_in_reading_order(self):
        self.assertEqual(navigation.tab_target(0, 0, 2, 2), (0, 1))
        self.assertEqual(navigation.tab_target(0, 1, 2, 2), (1, 0))
        self.assertIsNone(navigation.tab_target(1, 1, 2, 2))

    def test_shift_tab_walks_backwards(self):
        self.assertEqual(navigation.tab_target(1, 0, 2, 2, backwards=True), (0, 1))
        self.assertEqual(navigation.tab_target(1, 1, 2, 2, backwards=True), (1, 0))
        self.assertIsNone(navigation.tab_target(0, 0, 2, 2, backwards=True))

    def test_step_after_commit_clamps(self):
        self.assertEqual(navigation.step_target(0, 0, 2, 2, 'Enter'), (1, 0))
        self.assertEqual(navigation.step_target(1, 0, 2, 2, 'Enter'), (1, 0))
        self.assertEqual(navigation.step_target(0, 1, 2, 2, 'Tab'), (0, 1))
        self.assertEqual(navigation.step_target(0, 1, 2, 2, 'Tab', backwards=True), (0, 0))

    def test_printable_keys(self):
        self.assertTrue(KeyEvent('a').is_printable)
        self.assertTrue(KeyEvent('A', shift=True).is_printable)
        self.assertFalse(KeyEvent('a', ctrl=True).is_printable)
        self.assertFalse(KeyEvent('c', meta=True).is_printable)
        self.assertFalse(KeyEvent('Enter').is_printable)
