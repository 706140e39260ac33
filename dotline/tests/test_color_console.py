import unittest
from unittest.mock import patch
import sys

from dotline.color_console import (
    print_success, print_warning, print_error, print_info, print_debug, print_document,
    COLOR_SUCCESS, COLOR_WARNING, COLOR_ERROR, COLOR_INFO, COLOR_DEBUG, COLOR_RESET
)


class TestColorConsole(unittest.TestCase):

    @patch('dotline.color_console.IS_TTY', True)
    @patch('builtins.print')
    def test_print_success_color(self, mock_print):
        """Test that print_success uses the correct color code."""
        print_success("Success message")
        mock_print.assert_called_once()
        self.assertEqual(mock_print.call_args[0][0], f"{COLOR_SUCCESS}Success message{COLOR_RESET}")

    @patch('dotline.color_console.IS_TTY', True)
    @patch('builtins.print')
    def test_print_warning_color(self, mock_print):
        print_warning("Warning message")
        mock_print.assert_called_once()
        self.assertEqual(mock_print.call_args[0][0], f"{COLOR_WARNING}Warning message{COLOR_RESET}")

    @patch('dotline.color_console.IS_TTY', True)
    @patch('builtins.print')
    def test_print_error_color(self, mock_print):
        """Test that print_error uses the correct color code and stderr."""
        print_error("Error message")
        mock_print.assert_called_once()
        self.assertEqual(mock_print.call_args[0][0], f"{COLOR_ERROR}Error message{COLOR_RESET}")
        self.assertEqual(mock_print.call_args[1]['file'], sys.stderr)

    @patch('dotline.color_console.IS_TTY', True)
    @patch('builtins.print')
    def test_print_info_color(self, mock_print):
        print_info("Info message")
        mock_print.assert_called_once()
        self.assertEqual(mock_print.call_args[0][0], f"{COLOR_INFO}Info message{COLOR_RESET}")

    @patch('dotline.color_console.IS_TTY', False)
    @patch('builtins.print')
    def test_no_color_when_not_tty(self, mock_print):
        """Test that no color codes are used when not in a TTY."""
        print_success("Plain message")
        mock_print.assert_called_once()
        self.assertEqual(mock_print.call_args[0][0], "Plain message")

    @patch('builtins.print')
    def test_quiet_mode_suppresses_output(self, mock_print):
        print_success("Should not be printed", quiet=True)
        print_warning("Should not be printed", quiet=True)
        print_error("Should not be printed", quiet=True)
        print_info("Should not be printed", quiet=True)
        mock_print.assert_not_called()

    @patch('dotline.color_console.IS_TTY', True)
    @patch('builtins.print')
    def test_print_debug(self, mock_print):
        """Test that debug messages only appear when enabled, dimmed and on stderr."""
        print_debug("hidden")
        mock_print.assert_not_called()
        print_debug("shown", debug=True)
        mock_print.assert_called_once()
        self.assertEqual(mock_print.call_args[0][0], f"{COLOR_DEBUG}[debug] shown{COLOR_RESET}")
        self.assertEqual(mock_print.call_args[1]['file'], sys.stderr)

    @patch('dotline.color_console.IS_TTY', True)
    @patch('builtins.print')
    def test_print_document_with_color(self, mock_print):
        print_document("a=1\n", "Merged doc.txt")
        self.assertEqual(mock_print.call_count, 3)
        mock_print.assert_any_call(f"\n{COLOR_INFO}--- Merged doc.txt ---{COLOR_RESET}")
        mock_print.assert_any_call("a=1\n", end="")
        mock_print.assert_any_call(f"{COLOR_INFO}----------------------{COLOR_RESET}")

    @patch('dotline.color_console.IS_TTY', False)
    @patch('builtins.print')
    def test_print_document_no_color(self, mock_print):
        print_document("a=1\n", "Merged doc.txt")
        self.assertEqual(mock_print.call_count, 3)
        mock_print.assert_any_call("\n--- Merged doc.txt ---")
        mock_print.assert_any_call("----------------------")

    @patch('builtins.print')
    def test_print_document_quiet(self, mock_print):
        print_document("a=1\n", "Merged doc.txt", quiet=True)
        mock_print.assert_called_once_with("a=1\n", end="")


if __name__ == '__main__':
    unittest.main()
