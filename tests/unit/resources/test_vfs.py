from __future__ import annotations

import os
from pathlib import Path

import pytest

from agentpro.core.exceptions import (
    FileIsADirectoryError,
    FileNotADirectoryError,
    NoPermissionsError,
    ResourceNotFoundError,
)
from agentpro.core.resources import Disposable, FileType, ReadOnlyResourceFS, VirtualURI
from helpers.trees import make_tree, snapshot


@pytest.fixture
def layout(tmp_path: Path):
    """An installed resource root next to a secret that must stay unreachable."""
    storage = tmp_path / "storage"
    root = make_tree(
        storage / "resources",
        {"alpha/doc1.md": "# Doc 1\n", "beta/doc2.md": "# Doc 2\n", "beta/with space.md": "spaced"},
    )
    (storage / "secret.txt").write_text("top secret", encoding="utf-8")
    return root, storage


@pytest.fixture
def fs(layout) -> ReadOnlyResourceFS:
    root, _ = layout
    return ReadOnlyResourceFS(root)


def test_uri_renders_scheme_and_forward_slashes(fs: ReadOnlyResourceFS) -> None:
    assert str(fs.uri("alpha/doc1.md")) == "agentpro:/alpha/doc1.md"
    assert str(fs.uri("alpha\\doc1.md")) == "agentpro:/alpha/doc1.md"
    assert str(fs.uri("beta/with space.md")) == "agentpro:/beta/with%20space.md"
    assert str(fs.uri()) == "agentpro:/"


@pytest.mark.parametrize(
    "raw",
    [
        "agentpro:/alpha/doc1.md",
        "agentpro:///alpha/doc1.md",
        "alpha/doc1.md",
        "/alpha/doc1.md",
        "alpha\\doc1.md",
    ],
)
def test_accepts_uri_and_relative_forms(fs: ReadOnlyResourceFS, raw: str) -> None:
    assert fs.read_text(raw) == "# Doc 1\n"


def test_parse_unquotes_path() -> None:
    uri = VirtualURI.parse("agentpro:/beta/with%20space.md", default_scheme="agentpro")

    assert uri == VirtualURI("agentpro", "beta/with space.md")
    assert uri.name == "with space.md"


def test_stat_reports_type_size_and_millisecond_times(fs: ReadOnlyResourceFS, layout) -> None:
    root, _ = layout
    file_stat = fs.stat("agentpro:/alpha/doc1.md")
    dir_stat = fs.stat("agentpro:/alpha")

    assert file_stat.type is FileType.FILE
    assert file_stat.size == len(b"# Doc 1\n")
    assert file_stat.mtime == int(os.stat(root / "alpha" / "doc1.md").st_mtime * 1000)
    assert dir_stat.type is FileType.DIRECTORY


def test_read_directory_lists_sorted_entries(fs: ReadOnlyResourceFS) -> None:
    assert fs.read_directory("") == [("alpha", FileType.DIRECTORY), ("beta", FileType.DIRECTORY)]
    assert fs.read_directory("agentpro:/beta") == [
        ("doc2.md", FileType.FILE),
        ("with space.md", FileType.FILE),
    ]


def test_read_file_returns_exact_bytes(fs: ReadOnlyResourceFS, layout) -> None:
    root, _ = layout

    assert fs.read_file("agentpro:/beta/doc2.md") == (root / "beta" / "doc2.md").read_bytes()


def test_missing_path_is_not_found(fs: ReadOnlyResourceFS) -> None:
    with pytest.raises(ResourceNotFoundError) as excinfo:
        fs.read_file("agentpro:/alpha/missing.md")
    assert isinstance(excinfo.value, FileNotFoundError)

    with pytest.raises(ResourceNotFoundError):
        fs.stat("agentpro:/gamma")
    with pytest.raises(ResourceNotFoundError):
        fs.read_directory("agentpro:/gamma")


def test_reading_a_directory_as_a_file_is_typed(fs: ReadOnlyResourceFS) -> None:
    with pytest.raises(FileIsADirectoryError) as excinfo:
        fs.read_file("agentpro:/alpha")

    assert isinstance(excinfo.value, IsADirectoryError)
    assert excinfo.value.to_json_error()["code"] == "FileIsADirectoryError"
    assert excinfo.value.context == {"uri": "agentpro:/alpha"}


def test_listing_a_file_as_a_directory_is_typed(fs: ReadOnlyResourceFS) -> None:
    with pytest.raises(FileNotADirectoryError) as excinfo:
        fs.read_directory("agentpro:/alpha/doc1.md")

    assert isinstance(excinfo.value, NotADirectoryError)
    assert excinfo.value.to_json_error()["code"] == "FileNotADirectoryError"


@pytest.mark.parametrize(
    "raw",
    [
        "agentpro:/../secret.txt",
        "agentpro:/alpha/../../secret.txt",
        "../secret.txt",
        "alpha\\..\\..\\secret.txt",
        "agentpro:/%2E%2E/secret.txt",
    ],
)
def test_traversal_outside_root_is_not_found(fs: ReadOnlyResourceFS, raw: str) -> None:
    for op in (fs.read_file, fs.stat, fs.read_directory):
        with pytest.raises(ResourceNotFoundError):
            op(raw)


def test_dotdot_that_stays_inside_root_is_allowed(fs: ReadOnlyResourceFS) -> None:
    assert fs.read_text("agentpro:/beta/../alpha/doc1.md") == "# Doc 1\n"


def test_symlink_escaping_root_is_not_found(fs: ReadOnlyResourceFS, layout) -> None:
    root, storage = layout
    (root / "alpha" / "leak.md").symlink_to(storage / "secret.txt")

    with pytest.raises(ResourceNotFoundError):
        fs.read_file("agentpro:/alpha/leak.md")


def test_symlinked_root_is_canonicalised(layout, tmp_path: Path) -> None:
    root, _ = layout
    link = tmp_path / "linked-root"
    link.symlink_to(root, target_is_directory=True)

    fs = ReadOnlyResourceFS(link)

    assert fs.read_text("alpha/doc1.md") == "# Doc 1\n"
    assert fs.resolve("alpha/doc1.md") == (root / "alpha" / "doc1.md").resolve()


def test_foreign_scheme_is_not_found(fs: ReadOnlyResourceFS) -> None:
    with pytest.raises(ResourceNotFoundError):
        fs.read_file("file:/alpha/doc1.md")


def test_custom_scheme(layout) -> None:
    root, _ = layout
    fs = ReadOnlyResourceFS(root, scheme="skills")

    assert str(fs.uri("alpha")) == "skills:/alpha"
    assert fs.read_text("skills:/alpha/doc1.md") == "# Doc 1\n"


def test_every_mutation_is_rejected_and_tree_unchanged(fs: ReadOnlyResourceFS, layout) -> None:
    root, _ = layout
    before = snapshot(root)

    attempts = [
        lambda: fs.write_file("agentpro:/alpha/doc1.md", b"changed"),
        lambda: fs.write_file("agentpro:/alpha/new.md", b"new", create=True),
        lambda: fs.create_directory("agentpro:/gamma"),
        lambda: fs.delete("agentpro:/alpha", recursive=True),
        lambda: fs.rename("agentpro:/alpha/doc1.md", "agentpro:/alpha/renamed.md"),
    ]
    for attempt in attempts:
        with pytest.raises(NoPermissionsError) as excinfo:
            attempt()
        assert isinstance(excinfo.value, PermissionError)
        assert "No permissions" in str(excinfo.value)

    assert snapshot(root) == before
    assert not (root / "gamma").exists()


def test_watch_returns_inert_disposable(fs: ReadOnlyResourceFS) -> None:
    handle = fs.watch("agentpro:/alpha", recursive=True)

    assert isinstance(handle, Disposable)
    handle.dispose()
    handle.dispose()
    assert handle.disposed


def test_disposable_runs_callback_once() -> None:
    calls = []
    handle = Disposable(lambda: calls.append(1))

    handle.dispose()
    handle.dispose()

    assert calls == [1]


def test_missing_root_reads_as_not_found(tmp_path: Path) -> None:
    fs = ReadOnlyResourceFS(tmp_path / "never-installed")

    with pytest.raises(ResourceNotFoundError):
        fs.read_directory("")
