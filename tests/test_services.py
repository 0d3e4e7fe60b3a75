"""
Tests for display-name sanitization, local storage and the leaderboard.
"""

import pytest

from flappy.services.leaderboard import Leaderboard
from flappy.services.names import sanitize_display_name
from flappy.services.storage import LocalStore, StoredProfile


class TestSanitizeDisplayName:
    """Test untrusted name handling."""

    def test_script_tag(self):
        result = sanitize_display_name("<script>alert(1)</script>")

        assert "<" not in result
        assert ">" not in result
        assert "script" not in result.lower()
        assert "javascript" not in result.lower()
        assert len(result) <= 20

    def test_javascript_url(self):
        result = sanitize_display_name("javascript:alert(document.cookie)")
        assert "javascript" not in result.lower()
        assert "script" not in result.lower()

    def test_spliced_keyword(self):
        """Removing one keyword must not leave another behind."""
        assert "script" not in sanitize_display_name("scrscriptipt").lower()

    def test_event_handler(self):
        result = sanitize_display_name('x onerror=alert(1)')
        assert "onerror" not in result.lower()

    def test_keeps_allowed_characters(self):
        assert sanitize_display_name("Jean-Luc 42") == "Jean-Luc 42"

    def test_strips_other_characters(self):
        assert sanitize_display_name("  Zoë_the*great!  ") == "Zothegreat"

    def test_collapses_whitespace(self):
        assert sanitize_display_name("a   b\t\nc") == "a b c"

    def test_tabs_and_newlines_separate_words(self):
        assert sanitize_display_name("Mary\tJane") == "Mary Jane"
        assert sanitize_display_name("Mary\r\nJane") == "Mary Jane"
        assert sanitize_display_name("a * b") == "a b"

    def test_length_cap(self):
        assert len(sanitize_display_name("x" * 100)) == 20
        assert sanitize_display_name("abcdef", max_length=3) == "abc"

    def test_none_and_non_string(self):
        assert sanitize_display_name(None) == ""
        assert sanitize_display_name(12345) == "12345"


class TestLocalStore:
    """Test JSON profile persistence."""

    def test_missing_file_reads_defaults(self, tmp_path):
        store = LocalStore(tmp_path / "missing.json")
        assert store.load() == StoredProfile()

    def test_roundtrip(self, tmp_path):
        store = LocalStore(tmp_path / "profile.json")
        store.save(StoredProfile(best_score=12, player_name="Kai"))
        assert store.load() == StoredProfile(best_score=12, player_name="Kai")

    def test_partial_updates(self, tmp_path):
        store = LocalStore(tmp_path / "profile.json")
        store.save_player_name("<em>Rin</em>")
        store.save_best_score(9)

        profile = store.load()
        assert profile.player_name == "Rin"
        assert profile.best_score == 9

    def test_corrupt_file_reads_defaults(self, tmp_path):
        path = tmp_path / "profile.json"
        path.write_text("{not json")
        assert LocalStore(path).load() == StoredProfile()

    def test_tampered_values_are_sanitized(self, tmp_path):
        path = tmp_path / "profile.json"
        path.write_text('{"best_score": "lots", "player_name": "<script>Mo</script>"}')
        profile = LocalStore(path).load()

        assert profile.best_score == 0
        assert profile.player_name == "Mo"


class TestLeaderboard:
    """Test SQLite leaderboard."""

    @pytest.fixture
    def board(self):
        board = Leaderboard(":memory:")
        yield board
        board.close()

    def test_keeps_max_per_name(self, board):
        board.submit("Ada", 5)
        board.submit("Ada", 3)
        board.submit("Ada", 8)
        assert board.fetch_top(10) == [("Ada", 8)]

    def test_orders_by_score(self, board):
        board.submit("Ada", 5)
        board.submit("Bo", 9)
        board.submit("Cy", 7)

        assert board.fetch_top(2) == [("Bo", 9), ("Cy", 7)]

    def test_names_are_sanitized(self, board):
        board.submit("<b>Dee</b>", 4)
        assert board.fetch_top(1) == [("Dee", 4)]

    def test_empty_name_rejected(self, board):
        with pytest.raises(ValueError):
            board.submit("<script></script>", 4)

    def test_persists_to_file(self, tmp_path):
        path = str(tmp_path / "board.db")
        board = Leaderboard(path)
        board.submit("Ada", 5)
        board.close()

        reopened = Leaderboard(path)
        assert reopened.fetch_top(5) == [("Ada", 5)]
        reopened.close()
