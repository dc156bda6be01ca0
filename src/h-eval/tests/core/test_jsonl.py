"""Tests for JSONL file helpers."""

from pathlib import Path

from h_eval.core.jsonl import drop_partial_tail


class TestDropPartialTail:
    def test_missing_file_is_left_alone(self, tmp_path: Path) -> None:
        path = tmp_path / "absent.jsonl"

        assert drop_partial_tail(path=path) == 0
        assert not path.exists()

    def test_clean_file_is_unchanged(self, tmp_path: Path) -> None:
        path = tmp_path / "data.jsonl"
        path.write_text('{"a": 1}\n{"b": 2}\n', encoding="utf-8")

        assert drop_partial_tail(path=path) == 0
        assert path.read_text(encoding="utf-8") == '{"a": 1}\n{"b": 2}\n'

    def test_unterminated_last_line_is_removed(self, tmp_path: Path) -> None:
        path = tmp_path / "data.jsonl"
        path.write_text('{"a": 1}\n{"b": ', encoding="utf-8")

        assert drop_partial_tail(path=path) == len('{"b": ')
        assert path.read_text(encoding="utf-8") == '{"a": 1}\n'

    def test_single_partial_line_empties_the_file(self, tmp_path: Path) -> None:
        path = tmp_path / "data.jsonl"
        path.write_text('{"a"', encoding="utf-8")

        drop_partial_tail(path=path)

        assert path.read_text(encoding="utf-8") == ""
