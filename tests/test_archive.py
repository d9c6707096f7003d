"""Tests for archive and tree helpers."""

import shutil
import zipfile

import pytest

from protoforge.output.archive import (
    cleanup_project,
    create_project_archive,
    get_file_tree,
    iter_project_files,
)


@pytest.fixture
def project(tmp_path):
    """A small project directory with hidden and vendor entries."""
    root = tmp_path / "demo"
    (root / "code").mkdir(parents=True)
    (root / "docs").mkdir()
    (root / "node_modules" / "pkg").mkdir(parents=True)
    (root / "code" / "main.ino").write_text("void loop(){}", encoding="utf-8")
    (root / "docs" / "a.md").write_text("# A", encoding="utf-8")
    (root / "README.md").write_text("# Demo", encoding="utf-8")
    (root / ".protoforge-meta.json").write_text("{}", encoding="utf-8")
    (root / "node_modules" / "pkg" / "index.js").write_text("", encoding="utf-8")
    return root


class TestArchive:
    """Test ZIP packaging."""

    def test_skips_dot_and_vendor_entries(self, project):
        """Test which files are archived."""
        names = [p.relative_to(project).as_posix() for p in iter_project_files(project)]
        assert names == ["README.md", "code/main.ino", "docs/a.md"]

    def test_create_archive(self, project):
        """Test archive location and contents."""
        archive_path = create_project_archive(project)

        assert archive_path == project.parent / "demo.zip"
        with zipfile.ZipFile(archive_path) as archive:
            assert sorted(archive.namelist()) == ["README.md", "code/main.ino", "docs/a.md"]
            assert archive.read("code/main.ino") == b"void loop(){}"

    def test_custom_name(self, project):
        """Test the output name override."""
        archive_path = create_project_archive(project, output_name="bundle")
        assert archive_path.name == "bundle.zip"
        assert archive_path.is_file()


class TestFileTree:
    """Test tree rendering."""

    def test_tree(self, project):
        """Test directories first, hidden entries omitted."""
        shutil.rmtree(project / "node_modules")

        assert get_file_tree(project) == (
            "├── code/\n"
            "│   └── main.ino\n"
            "├── docs/\n"
            "│   └── a.md\n"
            "└── README.md\n"
        )

    def test_empty_directory(self, tmp_path):
        """Test that an empty directory renders nothing."""
        assert get_file_tree(tmp_path) == ""


class TestCleanup:
    """Test project removal."""

    def test_cleanup(self, project):
        """Test removing an existing and a missing directory."""
        assert cleanup_project(project) is True
        assert not project.exists()
        assert cleanup_project(project) is False
