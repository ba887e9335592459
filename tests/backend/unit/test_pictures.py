from dogwalking.backend.pictures import DEFAULT_PICTURE_PATH, load_picture, picture_loader


def test_load_picture_reads_file(tmp_path) -> None:
    picture = tmp_path / "yuna.jpg"
    picture.write_bytes(b"\xff\xd8yuna")

    assert load_picture(picture) == b"\xff\xd8yuna"


def test_load_picture_returns_empty_bytes_when_missing(tmp_path, caplog) -> None:
    assert load_picture(tmp_path / "missing.jpg") == b""
    assert "Could not read picture" in caplog.text


def test_picture_loader_defaults_to_packaged_picture() -> None:
    fetch = picture_loader()

    assert DEFAULT_PICTURE_PATH.is_file()
    assert fetch().startswith(b"GIF89a")
