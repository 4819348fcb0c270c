from __future__ import annotations

import os
from pathlib import Path

import pytest

import pathentry.entry as entry_module
from common.shared.loader import PathSettings
from pathentry.entry import FileInfo, PathEntry


# ----------------------------------------------------------------------
# Virtual (string-only) entries
# ----------------------------------------------------------------------

def test_virtual_local_path_accessors() -> None:
    raw = os.sep.join(["", "nonexistent-root", "dir", "report.final.csv"])
    entry = PathEntry(raw)

    assert not entry.is_resolved
    assert entry.pathname == raw
    assert entry.filename == "report.final.csv"
    assert entry.extension == "csv"
    assert entry.filename_without_extension == "report.final"
    assert entry.path == os.sep.join(["", "nonexistent-root", "dir"])
    assert entry.size is None
    assert entry.human_size is None
    assert entry.is_url is False


def test_virtual_url_accessors() -> None:
    entry = PathEntry("https://example.com/files/a.b/archive.tar.gz")

    assert entry.is_url is True
    assert entry.filename == "archive.tar.gz"
    assert entry.extension == "gz"
    assert entry.filename_without_extension == "archive.tar"
    assert entry.path == "https://example.com/files/a.b"


def test_virtual_entry_without_extension_or_separator() -> None:
    entry = PathEntry("https://example.com/download")
    bare = PathEntry("just-a-name")

    assert entry.extension is None
    assert entry.filename_without_extension == "download"
    assert bare.filename == "just-a-name"
    assert bare.path == ""


# ----------------------------------------------------------------------
# Resolved entries
# ----------------------------------------------------------------------

def test_resolved_entry_reads_platform_metadata(make_file) -> None:
    source = make_file("data/report.final.csv", "hello")

    entry = PathEntry(str(source))

    assert entry.is_resolved
    assert entry.pathname == str(source.resolve())
    assert entry.filename == "report.final.csv"
    assert entry.extension == "csv"
    assert entry.filename_without_extension == "report.final"
    assert entry.path == str(source.parent.resolve())
    assert entry.size == 5


def test_resolved_metadata_is_a_snapshot(make_file) -> None:
    source = make_file("grow.txt", "ab")
    entry = PathEntry(source)

    source.write_bytes(b"abcdef")
    assert entry.size == 2

    assert entry.refresh().size == 6


def test_directory_entry_has_no_size(tmp_path: Path) -> None:
    entry = PathEntry(tmp_path)

    assert entry.is_resolved
    assert entry.info is not None and entry.info.is_dir
    assert entry.size is None


def test_human_size(make_file) -> None:
    entry = PathEntry(make_file("blob.bin", b"\0" * 2048))

    assert entry.human_size == "2.0KB"


def test_file_info_requires_existing_path(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        FileInfo.from_path(tmp_path / "nope.txt")


def test_static_helpers_are_exposed_on_the_class(make_file) -> None:
    source = make_file("a.txt")

    assert PathEntry.extension_from_filename("x.tar.gz") == "gz"
    assert PathEntry.free_path(str(source), "-") == str(source.with_name("a-1.txt"))


# ----------------------------------------------------------------------
# Content
# ----------------------------------------------------------------------

def test_get_content_preserves_carriage_returns(make_file) -> None:
    entry = PathEntry(make_file("crlf.txt", b"a\r\nb"))

    assert entry.get_content() == "a\r\nb"


def test_get_content_returns_none_when_unreadable(tmp_path: Path, make_file) -> None:
    assert PathEntry(tmp_path / "missing.txt").get_content() is None
    assert PathEntry(make_file("binary.dat", b"\xff\xfe\xfa")).get_content() is None


def test_set_content_overwrites_without_newline_translation(make_file) -> None:
    source = make_file("out.txt", "old")
    entry = PathEntry(source)

    entry.set_content("line1\nline2\r\n")

    assert source.read_bytes() == b"line1\nline2\r\n"


def test_set_content_creates_file_for_virtual_entry(tmp_path: Path) -> None:
    entry = PathEntry(tmp_path / "new.txt")
    assert not entry.is_resolved

    entry.set_content("fresh")

    assert entry.is_resolved
    assert (tmp_path / "new.txt").read_text(encoding="utf-8") == "fresh"


def test_set_content_raises_when_not_writable(tmp_path: Path) -> None:
    entry = PathEntry(tmp_path / "missing-dir" / "x.txt")

    with pytest.raises(OSError):
        entry.set_content("x")


def test_normalize_end_lines_doubles_existing_crlf(make_file) -> None:
    source = make_file("mixed.txt", b"a\r\nb\nc\rd")

    PathEntry(source).normalize_end_lines()

    # Each \r and each \n is replaced on its own, so "\r\n" becomes "\r\n\r\n".
    assert source.read_bytes() == b"a\r\n\r\nb\r\nc\r\nd"


def test_normalize_end_lines_keeps_single_byte_encodings(make_file) -> None:
    source = make_file("legacy.txt", "café\nbar".encode("cp1252"))

    PathEntry(source).normalize_end_lines()

    assert source.read_bytes() == "café\r\nbar".encode("cp1252")


def test_normalize_end_lines_raises_when_unreadable(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        PathEntry(tmp_path / "missing.txt").normalize_end_lines()


# ----------------------------------------------------------------------
# Encoding detection
# ----------------------------------------------------------------------

def test_detect_encoding_ascii(make_file) -> None:
    assert PathEntry(make_file("plain.txt", "hello world\n")).detect_encoding() == "ascii"


def test_detect_encoding_utf8(make_file) -> None:
    text = "Déjà vu, naïve café, résumé, façade, crème brûlée.\n" * 20

    assert PathEntry(make_file("utf8.txt", text)).detect_encoding() == "utf-8"


def test_detect_encoding_respects_candidate_list(make_file) -> None:
    text = "Déjà vu, naïve café, résumé, façade, crème brûlée.\n" * 20
    entry = PathEntry(make_file("utf8.txt", text))

    assert entry.detect_encoding(encodings=["ascii"]) is None


def test_detect_encoding_falls_back_to_decodable_candidate(make_file) -> None:
    payload = ("Le café était très animé, déjà plein à midi.\n" * 20).encode("cp1252")
    entry = PathEntry(make_file("legacy.txt", payload))

    assert entry.detect_encoding(encodings=["utf-8", "windows-1252"]) == "windows-1252"


def test_detect_encoding_only_reads_the_sample(make_file) -> None:
    payload = b"plain text" + "é".encode("utf-8") * 10
    entry = PathEntry(make_file("prefix.txt", payload))

    assert entry.detect_encoding(sample_size=10) == "ascii"


def test_detect_encoding_unknown_for_empty_or_missing(tmp_path: Path, make_file) -> None:
    assert PathEntry(make_file("empty.txt", b"")).detect_encoding() is None
    assert PathEntry(tmp_path / "missing.txt").detect_encoding() is None


# ----------------------------------------------------------------------
# Move / copy
# ----------------------------------------------------------------------

def test_move_reflects_new_location(tmp_path: Path, make_file) -> None:
    source = make_file("a.txt", "content")
    target_dir = tmp_path / "sub"
    target_dir.mkdir()
    entry = PathEntry(str(source))

    assert entry.move(str(target_dir / "b.txt")) is True

    assert not source.exists()
    assert entry.filename == "b.txt"
    assert entry.path == str(target_dir.resolve())
    assert entry.pathname == str((target_dir / "b.txt").resolve())
    assert entry.raw_path == str(source)


def test_move_avoids_existing_target(tmp_path: Path, make_file) -> None:
    source = make_file("a.txt", "new")
    existing = make_file("b.txt", "keep")
    entry = PathEntry(source)

    assert entry.move(tmp_path / "b.txt") is True

    assert existing.read_text(encoding="utf-8") == "keep"
    assert entry.filename == "b-1.txt"
    assert entry.get_content() == "new"


def test_move_with_overwrite_replaces_target(tmp_path: Path, make_file) -> None:
    source = make_file("a.txt", "new")
    existing = make_file("b.txt", "old")

    assert PathEntry(source).move(existing, overwrite=True) is True

    assert existing.read_text(encoding="utf-8") == "new"
    assert not source.exists()


def test_move_rejects_empty_target(make_file) -> None:
    entry = PathEntry(make_file("a.txt"))

    with pytest.raises(ValueError):
        entry.move("")


def test_move_failure_leaves_entry_unchanged(tmp_path: Path, make_file) -> None:
    source = make_file("a.txt")
    entry = PathEntry(source)
    before = entry.pathname

    assert entry.move(tmp_path / "missing-dir" / "b.txt") is False

    assert entry.pathname == before
    assert source.exists()


def test_move_of_virtual_entry_fails(tmp_path: Path) -> None:
    entry = PathEntry(tmp_path / "ghost.txt")

    assert entry.move(tmp_path / "other.txt") is False
    assert not entry.is_resolved


def test_move_promotes_uploaded_files(tmp_path: Path, make_file, monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[tuple[str, str]] = []
    real_promote = entry_module.promote_upload

    def _recording_promote(src, dst):
        calls.append((str(src), str(dst)))
        return real_promote(src, dst)

    monkeypatch.setattr(entry_module, "promote_upload", _recording_promote)
    source = make_file("upload.tmp", "payload")
    entry = PathEntry(source, uploaded=True)

    assert entry.move(tmp_path / "final.txt") is True

    assert calls == [(str(source.resolve()), str(tmp_path / "final.txt"))]
    assert entry.uploaded is False
    assert entry.filename == "final.txt"


def test_move_uploaded_file_onto_directory_fails(tmp_path: Path, make_file) -> None:
    source = make_file("upload.tmp", "payload")
    (tmp_path / "final.txt").mkdir()
    entry = PathEntry(source, uploaded=True)

    assert entry.move(tmp_path / "final.txt", overwrite=True) is False

    assert entry.last_move is False
    assert entry.filename == "upload.tmp"
    assert source.exists()
    assert list((tmp_path / "final.txt").iterdir()) == []


def test_copy_returns_independent_entry(tmp_path: Path, make_file) -> None:
    source = make_file("a.txt", "original")
    entry = PathEntry(source)

    copied = entry.copy(tmp_path / "b.txt")

    assert copied is not None
    assert copied != entry
    assert copied.get_content() == "original"

    copied.set_content("changed")
    assert entry.get_content() == "original"


def test_copy_avoids_existing_target(tmp_path: Path, make_file) -> None:
    source = make_file("a.txt", "x")
    make_file("b.txt", "keep")

    copied = PathEntry(source).copy(tmp_path / "b.txt")

    assert copied is not None
    assert copied.filename == "b-1.txt"
    assert (tmp_path / "b.txt").read_text(encoding="utf-8") == "keep"


def test_copy_failure_returns_none(tmp_path: Path, make_file) -> None:
    entry = PathEntry(make_file("a.txt"))

    assert entry.copy(tmp_path / "missing-dir" / "b.txt") is None


# ----------------------------------------------------------------------
# Slugified rename
# ----------------------------------------------------------------------

def test_set_name_slugified_keeps_extension(tmp_path: Path, make_file) -> None:
    entry = PathEntry(make_file("photo.jpg"))

    result = entry.set_name_slugified("My Holiday Photo!")

    assert result is entry
    assert entry.filename == "my-holiday-photo.jpg"
    assert (tmp_path / "my-holiday-photo.jpg").exists()


def test_set_name_slugified_truncates_to_max_length(make_file) -> None:
    entry = PathEntry(make_file("photo.jpg"))

    entry.set_name_slugified("A very long descriptive title", max_length=12)

    assert entry.filename == "a-very-l.jpg"


def test_set_name_slugified_reserves_room_for_collision_suffix(tmp_path: Path, make_file) -> None:
    taken = make_file("a-very-l.jpg", "other")
    entry = PathEntry(make_file("photo.jpg"))

    entry.set_name_slugified("A very long descriptive title", max_length=12)

    assert len(entry.filename) <= 12
    assert entry.filename == "a-very.jpg"
    assert taken.read_text(encoding="utf-8") == "other"


@pytest.mark.parametrize("max_length", [5, 8, 13, 20, 40])
def test_set_name_slugified_never_exceeds_max_length(make_file, max_length: int) -> None:
    for name in ("a-very-l.jpg", "a-ve.jpg", "a-very-long-desc.jpg"):
        make_file(name, "other")
    entry = PathEntry(make_file("photo.jpg"))

    entry.set_name_slugified("A very long descriptive title", max_length=max_length)

    assert len(entry.filename) <= max_length


def test_set_name_slugified_rejects_too_small_max_length(make_file) -> None:
    entry = PathEntry(make_file("photo.jpeg"))

    with pytest.raises(ValueError):
        entry.set_name_slugified("name", max_length=5)


def test_set_name_slugified_to_current_name_is_a_noop(make_file) -> None:
    source = make_file("report.txt")
    entry = PathEntry(source)

    entry.set_name_slugified("Report")

    assert entry.filename == "report.txt"
    assert source.exists()


def test_set_name_slugified_without_extension(tmp_path: Path, make_file) -> None:
    entry = PathEntry(make_file("README"))

    entry.set_name_slugified("Read Me First")

    assert entry.filename == "read-me-first"
    assert entry.extension is None
    assert (tmp_path / "read-me-first").exists()


def test_set_name_slugified_records_failed_rename(tmp_path: Path, make_file) -> None:
    source = make_file("a.txt")
    (tmp_path / "taken.txt").mkdir()
    entry = PathEntry(source)

    entry.set_name_slugified("Taken", overwrite=True)

    assert entry.last_move is False
    assert entry.filename == "a.txt"
    assert source.exists()


def test_set_name_slugified_uses_configured_defaults(make_file) -> None:
    settings = PathSettings(separator="_", lowercase=False)
    entry = PathEntry(make_file("draft.md"), settings=settings)

    entry.set_name_slugified("Final Draft v2")

    assert entry.filename == "Final_Draft_v2.md"


def test_repr_and_fspath(make_file, tmp_path: Path) -> None:
    entry = PathEntry(make_file("a.txt"))

    assert os.fspath(entry) == entry.pathname
    assert "resolved" in repr(entry)
    assert "virtual" in repr(PathEntry(tmp_path / "none.txt"))


def test_entries_compare_by_pathname_but_are_unhashable(make_file) -> None:
    source = make_file("a.txt")

    assert PathEntry(source) == PathEntry(str(source))
    with pytest.raises(TypeError):
        hash(PathEntry(source))
