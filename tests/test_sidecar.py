import json

import pytest

from content_manager.error_handling import LocalMissingError, MetadataError
from content_manager.models import SidecarMetadata, CommitResult
from content_manager.repository import SidecarStore, sidecar_path


@pytest.fixture
def store():
    return SidecarStore()


def test_sidecar_path():
    assert str(sidecar_path("site/index.html")) == "site/index.html.meta.json"


def test_save_and_load_round_trip(tmp_path, store):
    content_path = tmp_path / "index.html"
    metadata = SidecarMetadata(path="docs/index.html", sha="abc", branch="gh-pages",
                               checked_out_at="2024-05-01T12:00:00.000Z")

    store.save_metadata(content_path, metadata)

    on_disk = json.loads((tmp_path / "index.html.meta.json").read_text(encoding="utf-8"))
    assert on_disk == {
        "path": "docs/index.html",
        "sha": "abc",
        "branch": "gh-pages",
        "checkedOutAt": "2024-05-01T12:00:00.000Z"
    }
    assert store.load_metadata(content_path) == metadata


def test_save_leaves_no_temp_files(tmp_path, store):
    store.save_metadata(tmp_path / "a.md", SidecarMetadata(path="a.md", sha="1", branch="main"))

    assert sorted(p.name for p in tmp_path.iterdir()) == ["a.md.meta.json"]


def test_missing_sidecar(tmp_path, store):
    with pytest.raises(LocalMissingError, match="Did you checkout this file first"):
        store.load_metadata(tmp_path / "a.md")


def test_missing_content(tmp_path, store):
    with pytest.raises(LocalMissingError, match="Local file not found"):
        store.read_content(tmp_path / "a.md")


@pytest.mark.parametrize("raw, match", [
    ("{not json", "not valid JSON"),
    ('["a"]', "must contain a JSON object"),
    ('{"path": "a.md"}', "missing field"),
    ('{"path": "a.md", "sha": "", "branch": "main"}', "missing field 'sha'"),
])
def test_malformed_sidecar(tmp_path, store, raw, match):
    (tmp_path / "a.md.meta.json").write_text(raw, encoding="utf-8")

    with pytest.raises(MetadataError, match=match):
        store.load_metadata(tmp_path / "a.md")


def test_unknown_keys_survive_rewrite(tmp_path, store):
    (tmp_path / "a.md.meta.json").write_text(json.dumps({
        "path": "a.md", "sha": "1", "branch": "main",
        "checkedOutAt": "2024-05-01T12:00:00.000Z", "note": "keep me"
    }), encoding="utf-8")

    with store.metadata_session(tmp_path / "a.md") as metadata:
        metadata.sha = "2"

    on_disk = json.loads((tmp_path / "a.md.meta.json").read_text(encoding="utf-8"))
    assert on_disk["note"] == "keep me"
    assert on_disk["sha"] == "2"


def test_session_does_not_persist_on_error(tmp_path, store):
    content_path = tmp_path / "a.md"
    store.save_metadata(content_path, SidecarMetadata(path="a.md", sha="1", branch="main"))

    with pytest.raises(RuntimeError):
        with store.metadata_session(content_path) as metadata:
            metadata.sha = "2"
            raise RuntimeError("commit failed")

    assert store.load_metadata(content_path).sha == "1"


def test_record_commit_prefers_blob_sha():
    metadata = SidecarMetadata(path="a.md", sha="blob1", branch="main")

    metadata.record_commit(CommitResult(sha="commit2", url="https://example.test/c/2",
                                        message="m", content_sha="blob2"))

    assert metadata.sha == "blob2"
    assert metadata.last_commit == "https://example.test/c/2"
    assert metadata.last_commit_sha == "commit2"
    assert metadata.last_updated_at.endswith("Z")


def test_content_round_trip_keeps_line_endings(tmp_path, store):
    path = store.write_content(tmp_path / "nested" / "a.txt", "one\r\ntwo\n")

    assert store.read_content(path) == "one\r\ntwo\n"
