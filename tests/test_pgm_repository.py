from __future__ import annotations

import errno
from pathlib import Path

import numpy as np
import pytest

from pgm_denoise.models.errors import (
    PgmParseError,
    PgmReadError,
    PgmWriteError,
    UnsupportedFormatError,
)
from pgm_denoise.repositories.pgm_repository import PgmRepository


def _parse(text: str):
    return PgmRepository.parse_lines(text.splitlines(keepends=True))


def test_parse_basic_file() -> None:
    img = _parse("P2\n3 2\n255\n1 2 3\n4 5 6\n")
    assert (img.width, img.height) == (3, 2)
    assert img.pixels.dtype == np.uint8
    assert img.pixels.tolist() == [1, 2, 3, 4, 5, 6]


def test_comments_anywhere_are_ignored() -> None:
    img = _parse(
        "# leading comment\nP2\n# made by hand\n2 2\n# before max\n255\n1 2\n# 9 9 9\n3 4\n"
    )
    assert (img.width, img.height) == (2, 2)
    assert img.pixels.tolist() == [1, 2, 3, 4]


def test_surrounding_whitespace_and_blank_lines() -> None:
    img = _parse("  P2  \n\n  2 1 \n 255\n\n   7    8   \n")
    assert (img.width, img.height) == (2, 1)
    assert img.pixels.tolist() == [7, 8]


def test_pixels_may_span_lines_freely() -> None:
    img = _parse("P2\n2 3\n255\n1 2 3\n4\n5 6\n")
    assert img.pixels.tolist() == [1, 2, 3, 4, 5, 6]


def test_missing_tag_is_tolerated() -> None:
    img = _parse("2 1\n255\n9 10\n")
    assert (img.width, img.height) == (2, 1)
    assert img.pixels.tolist() == [9, 10]


def test_file_ending_in_header_has_no_pixels() -> None:
    img = _parse("P2\n3 3\n")
    assert (img.width, img.height) == (3, 3)
    assert img.pixel_count == 0


def test_empty_input_gives_empty_image() -> None:
    img = _parse("")
    assert (img.width, img.height, img.pixel_count) == (0, 0, 0)


def test_pixel_count_is_not_checked_by_reader() -> None:
    img = _parse("P2\n2 2\n255\n1 2 3\n")
    assert img.pixel_count == 3
    assert not img.has_valid_shape()


@pytest.mark.parametrize("line", ["three 3", "3", "3 3 3", "-1 2", "2.5 2"])
def test_invalid_dimensions(line: str) -> None:
    with pytest.raises(PgmParseError) as exc:
        _parse(f"P2\n{line}\n255\n")
    assert exc.value.line_number == 2


def test_pixel_row_where_max_value_expected_is_rejected() -> None:
    with pytest.raises(PgmParseError) as exc:
        _parse("P2\n2 2\n1 2\n3 4\n")
    assert exc.value.line_number == 3
    assert "maximum gray value" in str(exc.value)


def test_max_value_above_byte_range_is_unsupported() -> None:
    with pytest.raises(UnsupportedFormatError):
        _parse("P2\n1 1\n65535\n1000\n")


def test_zero_max_value_is_rejected() -> None:
    with pytest.raises(PgmParseError):
        _parse("P2\n1 1\n0\n0\n")


@pytest.mark.parametrize("magic", ["P5", "P3", "P1"])
def test_other_netpbm_formats_are_unsupported(magic: str) -> None:
    with pytest.raises(UnsupportedFormatError) as exc:
        _parse(f"{magic}\n1 1\n255\n0\n")
    assert exc.value.line_number == 1


@pytest.mark.parametrize("token", ["256", "-3", "abc", "1.0"])
def test_invalid_pixel_token(token: str) -> None:
    with pytest.raises(PgmParseError) as exc:
        _parse(f"P2\n2 1\n255\n0\n{token}\n")
    assert exc.value.line_number == 5
    assert token in str(exc.value)


def test_load_reports_path_and_line(tmp_path: Path) -> None:
    path = tmp_path / "bad.pgm"
    path.write_text("P2\n2 1\n255\n1 x\n")
    with pytest.raises(PgmParseError) as exc:
        PgmRepository.load(path)
    assert exc.value.path == path
    assert str(exc.value).startswith(f"{path}:4:")


def test_load_missing_file(tmp_path: Path) -> None:
    with pytest.raises(PgmReadError):
        PgmRepository.load(tmp_path / "nope.pgm")


def test_load_binary_garbage(tmp_path: Path) -> None:
    path = tmp_path / "binary.pgm"
    path.write_bytes(b"P2\n1 1\n255\n\xff\xfe\x00\n")
    with pytest.raises(PgmParseError):
        PgmRepository.load(path)


def test_encode_layout() -> None:
    img = PgmRepository.create_image(2, 2, [1, 2, 3, 4])
    assert PgmRepository.encode(img) == "P2\n2 2\n255\n1 2 \n3 4 \n"


def test_encode_partial_last_row_has_no_newline() -> None:
    img = PgmRepository.create_image(2, 2, [1, 2, 3])
    assert PgmRepository.encode(img) == "P2\n2 2\n255\n1 2 \n3 "


def test_encode_always_writes_255_as_max_value() -> None:
    img = PgmRepository.create_image(1, 1, [7])
    assert PgmRepository.encode(img).splitlines()[2] == "255"


def test_save_then_load_round_trip(tmp_path: Path) -> None:
    original = PgmRepository.create_image(3, 2, [0, 128, 255, 17, 34, 51])
    path = PgmRepository.save(original, tmp_path / "img.pgm")

    assert path.read_bytes() == b"P2\n3 2\n255\n0 128 255 \n17 34 51 \n"
    loaded = PgmRepository.load(path)
    assert (loaded.width, loaded.height) == (3, 2)
    assert loaded.pixels.tolist() == original.pixels.tolist()
    assert loaded.path == path


def test_load_tolerates_missing_trailing_newline(tmp_path: Path) -> None:
    path = tmp_path / "img.pgm"
    path.write_text("P2\n2 1\n255\n5 6")
    assert PgmRepository.load(path).pixels.tolist() == [5, 6]


def test_save_uses_image_path(tmp_path: Path) -> None:
    img = PgmRepository.create_image(1, 1, [3], tmp_path / "one.pgm")
    assert PgmRepository.save(img) == tmp_path / "one.pgm"
    assert (tmp_path / "one.pgm").exists()


def test_save_into_missing_directory_fails(tmp_path: Path) -> None:
    img = PgmRepository.create_image(1, 1, [3])
    with pytest.raises(PgmWriteError):
        PgmRepository.save(img, tmp_path / "missing" / "one.pgm")


def test_iter_dir_only_yields_pgm_files(tmp_path: Path) -> None:
    (tmp_path / "a.pgm").write_text("P2\n1 1\n255\n0\n")
    (tmp_path / "b.txt").write_text("hello")
    (tmp_path / "c.pgm").mkdir()
    (tmp_path / "d.PGM").write_text("P2\n1 1\n255\n0\n")

    assert list(PgmRepository.iter_dir(tmp_path)) == [tmp_path / "a.pgm"]


def test_iter_dir_missing_folder(tmp_path: Path) -> None:
    with pytest.raises(PgmReadError):
        list(PgmRepository.iter_dir(tmp_path / "missing"))


def test_ensure_dir_creates_parents(tmp_path: Path) -> None:
    target = tmp_path / "src" / "filtered_images"
    assert PgmRepository.ensure_dir(target) == target
    assert target.is_dir()
    PgmRepository.ensure_dir(target)


def test_ensure_dir_over_a_file_fails(tmp_path: Path) -> None:
    blocker = tmp_path / "out"
    blocker.write_text("")
    with pytest.raises(PgmWriteError):
        PgmRepository.ensure_dir(blocker)


def test_repeated_tag_before_max_value_is_skipped() -> None:
    img = _parse("2 1\nP2\n255\n3 4\n")
    assert (img.width, img.height) == (2, 1)
    assert img.pixels.tolist() == [3, 4]


def test_iter_dir_entry_that_cannot_be_inspected(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "a.pgm").write_text("P2\n1 1\n255\n0\n")
    real_is_file = Path.is_file

    def denied(self, *args, **kwargs):
        if self.name == "a.pgm":
            raise PermissionError(errno.EACCES, "Permission denied", str(self))
        return real_is_file(self, *args, **kwargs)

    monkeypatch.setattr(Path, "is_file", denied)
    with pytest.raises(PgmReadError) as exc:
        list(PgmRepository.iter_dir(tmp_path))
    assert exc.value.path == tmp_path / "a.pgm"
    assert isinstance(exc.value.__cause__, PermissionError)
