from core.file_types import classify, get_mime_type, is_explicitly_requested, looks_binary


def test_classify_by_extension_without_reading(tmp_path):
    # None of these files exist: the extension alone decides
    assert classify(str(tmp_path / "logo.png")) == "image"
    assert classify(str(tmp_path / "photo.JPG")) == "image"
    assert classify(str(tmp_path / "paper.pdf")) == "pdf"
    assert classify(str(tmp_path / "bundle.zip")) == "binary"
    assert classify(str(tmp_path / "clip.mp4")) == "binary"


def test_classify_svg_and_ts_as_text(tmp_path):
    assert classify(str(tmp_path / "icon.svg")) == "text"
    assert classify(str(tmp_path / "index.ts")) == "text"


def test_classify_sniffs_unknown_extensions(tmp_path):
    text = tmp_path / "notes.custom"
    text.write_text("hello\nworld\n", encoding="utf-8")
    blob = tmp_path / "blob.custom"
    blob.write_bytes(b"\x00\x01\x02binary")
    empty = tmp_path / "empty"
    empty.write_bytes(b"")

    assert classify(str(text)) == "text"
    assert classify(str(blob)) == "binary"
    assert classify(str(empty)) == "text"


def test_looks_binary():
    assert not looks_binary(b"")
    assert not looks_binary("plain text\twith tabs\r\n".encode("utf-8"))
    assert looks_binary(b"abc\x00def")
    assert looks_binary(bytes(range(1, 9)) * 10)


def test_get_mime_type():
    assert get_mime_type("a.png") == "image/png"
    assert get_mime_type("a.pdf") == "application/pdf"
    assert get_mime_type("noext") == ""


def test_explicit_request_by_extension():
    assert is_explicitly_requested("/w/assets/logo.png", ["**/*.png"])
    assert is_explicitly_requested("/w/assets/logo.png", ["*.PNG"])
    assert not is_explicitly_requested("/w/assets/logo.png", ["**/*.jpg", "docs/*"])


def test_explicit_request_by_name():
    assert is_explicitly_requested("/w/assets/logo.png", ["assets/logo*"])
    assert not is_explicitly_requested("/w/assets/logo.png", ["assets/*"])


def test_explicit_request_is_substring_based():
    # a directory name containing the extension also counts
    assert is_explicitly_requested("/w/x/diagram.png", ["my.pngs/**"])
