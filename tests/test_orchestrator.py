import json

import pytest

from content_manager.error_handling import (
    LocalMissingError, NotFoundError, NotAFileError, StalePreconditionError, GitHubAPIError
)
from content_manager.orchestrator import ContentManager


@pytest.fixture
def manager(fake_repo):
    lines = []
    manager = ContentManager(fake_repo, default_branch="main", reporter=lines.append)
    manager.lines = lines
    return manager


def _sidecar(path):
    return json.loads(path.with_name(path.name + ".meta.json").read_text(encoding="utf-8"))


def test_checkout_writes_content_and_sidecar(tmp_path, fake_repo, manager, monkeypatch):
    monkeypatch.chdir(tmp_path)
    sha = fake_repo.seed("docs/index.html", "<p>hello</p>")

    outcome = manager.checkout("docs/index.html")

    assert outcome.content_path.name == "index.html"
    assert (tmp_path / "index.html").read_text(encoding="utf-8") == "<p>hello</p>"
    meta = _sidecar(tmp_path / "index.html")
    assert meta["path"] == "docs/index.html"
    assert meta["sha"] == sha
    assert meta["branch"] == "main"
    assert meta["checkedOutAt"].endswith("Z")
    assert "lastCommit" not in meta
    assert manager.lines == ["Checking out: docs/index.html"]


def test_checkout_to_explicit_output(tmp_path, fake_repo, manager):
    fake_repo.seed("a.md", "A", branch="draft")

    outcome = manager.checkout("a.md", branch="draft", output=tmp_path / "work" / "copy.md")

    assert outcome.content_path == tmp_path / "work" / "copy.md"
    assert _sidecar(outcome.content_path)["branch"] == "draft"


def test_checkout_errors_write_nothing(tmp_path, fake_repo, manager):
    fake_repo.seed("docs/a.md", "A")

    with pytest.raises(NotFoundError):
        manager.checkout("missing.md", output=tmp_path / "missing.md")
    with pytest.raises(NotAFileError):
        manager.checkout("docs", output=tmp_path / "docs")

    assert list(tmp_path.iterdir()) == []


def test_round_trip_advances_revision(tmp_path, fake_repo, manager):
    original_sha = fake_repo.seed("index.html", "v1")
    local = tmp_path / "index.html"
    manager.checkout("index.html", output=local)

    outcome = manager.checkin(local, message="No changes")

    assert outcome.commit.sha != original_sha
    assert outcome.metadata.sha != original_sha
    meta = _sidecar(local)
    assert meta["sha"] == fake_repo.files[("main", "index.html")][1]
    assert meta["lastCommit"] == outcome.commit.url
    assert meta["lastCommitSha"] == outcome.commit.sha
    assert "lastUpdatedAt" in meta


def test_consecutive_checkins_use_advanced_revision(tmp_path, fake_repo, manager):
    fake_repo.seed("index.html", "v1")
    local = tmp_path / "index.html"
    manager.checkout("index.html", output=local)

    local.write_text("v2", encoding="utf-8")
    manager.checkin(local)
    local.write_text("v3", encoding="utf-8")
    manager.checkin(local)

    assert fake_repo.files[("main", "index.html")][0] == "v3"


def test_stale_checkin_fails_and_keeps_sidecar(tmp_path, fake_repo, manager):
    fake_repo.seed("index.html", "v1")
    local = tmp_path / "index.html"
    manager.checkout("index.html", output=local)
    before = _sidecar(local)

    # someone else commits in between
    current_sha = fake_repo.files[("main", "index.html")][1]
    fake_repo.checkin("index.html", "theirs", "other", current_sha, "main")

    local.write_text("mine", encoding="utf-8")
    with pytest.raises(StalePreconditionError):
        manager.checkin(local)

    assert _sidecar(local) == before
    assert fake_repo.files[("main", "index.html")][0] == "theirs"


def test_two_checkins_from_same_marker_cannot_both_succeed(tmp_path, fake_repo, manager):
    fake_repo.seed("index.html", "v1")
    first, second = tmp_path / "first.html", tmp_path / "second.html"
    manager.checkout("index.html", output=first)
    manager.checkout("index.html", output=second)

    manager.checkin(first)
    with pytest.raises(StalePreconditionError):
        manager.checkin(second)


def test_checkin_without_sidecar_makes_no_remote_call(tmp_path, fake_repo, manager):
    local = tmp_path / "index.html"
    local.write_text("orphan", encoding="utf-8")

    with pytest.raises(LocalMissingError, match="Metadata file not found"):
        manager.checkin(local)

    assert fake_repo.calls == []


def test_checkin_without_local_file(tmp_path, fake_repo, manager):
    with pytest.raises(LocalMissingError, match="Local file not found"):
        manager.checkin(tmp_path / "gone.html")

    assert fake_repo.calls == []


def test_checkin_branch_precedence(tmp_path, fake_repo, manager):
    for branch in ("main", "draft", "release"):
        fake_repo.seed("a.md", "A", branch=branch)
    local = tmp_path / "a.md"

    manager.checkout("a.md", branch="draft", output=local)
    assert manager.checkin(local).branch == "draft"

    manager.checkout("a.md", branch="release", output=local)
    assert manager.checkin(local, branch="release").branch == "release"

    sidecar = local.with_name("a.md.meta.json")
    meta = _sidecar(local)
    meta["branch"] = ""
    meta["sha"] = fake_repo.files[("main", "a.md")][1]
    sidecar.write_text(json.dumps(meta), encoding="utf-8")
    assert manager.checkin(local).branch == "main"


def test_checkin_to_other_branch_moves_sidecar(tmp_path, fake_repo, manager):
    fake_repo.seed("a.md", "A")
    # a branch cut from main shares the blob
    fake_repo.files[("draft", "a.md")] = fake_repo.files[("main", "a.md")]
    local = tmp_path / "a.md"
    manager.checkout("a.md", output=local)

    local.write_text("B", encoding="utf-8")
    manager.checkin(local, branch="draft")
    assert _sidecar(local)["branch"] == "draft"

    local.write_text("C", encoding="utf-8")
    assert manager.checkin(local).branch == "draft"
    assert fake_repo.files[("draft", "a.md")][0] == "C"
    assert fake_repo.files[("main", "a.md")][0] == "A"


def test_create_records_sidecar_for_later_checkin(tmp_path, fake_repo, manager):
    local = tmp_path / "new.md"
    local.write_text("# New", encoding="utf-8")

    outcome = manager.create(local, remote_path="pages/new.md")

    assert fake_repo.files[("main", "pages/new.md")][0] == "# New"
    assert _sidecar(local)["path"] == "pages/new.md"
    assert outcome.metadata.sha == fake_repo.files[("main", "pages/new.md")][1]

    local.write_text("# New, edited", encoding="utf-8")
    manager.checkin(local)
    assert fake_repo.files[("main", "pages/new.md")][0] == "# New, edited"


def test_update_commits_transformed_content(tmp_path, fake_repo, manager, monkeypatch):
    monkeypatch.chdir(tmp_path)
    fake_repo.seed("hi.txt", "hi")

    outcome = manager.update("hi.txt", find="h", replace="H", append="!", prepend=">> ",
                             message="Shout")

    assert outcome.commit is not None
    assert outcome.transform.content == ">> Hi!"
    assert fake_repo.files[("main", "hi.txt")][0] == ">> Hi!"
    assert list(tmp_path.iterdir()) == []
    assert manager.lines == [
        "Checking out: hi.txt",
        '✓ Replaced "h" with "H"',
        "✓ Appended content",
        "✓ Prepended content",
        "Checking in: hi.txt",
    ]


def test_update_without_change_skips_checkin(fake_repo, manager):
    fake_repo.seed("dog.txt", "dog")

    outcome = manager.update("dog.txt", find="a", replace="b")

    assert outcome.commit is None
    assert [call[0] for call in fake_repo.calls] == ["checkout"]
    assert '⚠ Text "a" not found in file' in manager.lines


def test_update_checkin_failure_propagates(fake_repo, manager, unclassified_error):
    fake_repo.seed("a.txt", "cat")
    original = fake_repo.checkin

    def failing_checkin(*args, **kwargs):
        fake_repo.fail_next = unclassified_error
        return original(*args, **kwargs)

    fake_repo.checkin = failing_checkin

    with pytest.raises(GitHubAPIError):
        manager.update("a.txt", find="a", replace="b")

    assert fake_repo.files[("main", "a.txt")][0] == "cat"


def test_list_and_info(fake_repo, manager):
    fake_repo.seed("index.html", "x")
    fake_repo.seed("docs/a.md", "a")
    fake_repo.seed("docs/b.md", "b")
    fake_repo.seed("docs/img/logo.svg", "svg")

    assert manager.list() == ["index.html"]
    assert manager.list("docs") == ["docs/a.md", "docs/b.md"]
    assert manager.list("docs/a.md") == ["docs/a.md"]

    info = manager.info()
    assert (info.owner, info.repo, info.default_branch) == ("octo", "site", "main")
