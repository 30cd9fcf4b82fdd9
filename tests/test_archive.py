"""
Unit tests for archive.py
"""

from datetime import datetime
from pathlib import Path
from unittest import mock

import pytest

from conftest import FakeRunner
from mysql_dump_all.archive import (
    ArchiveFinalizer,
    check_staging,
    create_staging,
    format_base_name,
    strip_archive_suffix,
)
from mysql_dump_all.models import (
    ArchiveError,
    DumpConfig,
    OutputMode,
    ProcessError,
    StagingError,
)
from mysql_dump_all.utils import working_directory

NOW = datetime(2024, 3, 5, 14, 7)


@pytest.fixture
def staging(tmp_path):
    """A populated staging directory, with the cwd set to its parent."""
    path = Path("mysqldump_20240305_1407")
    with working_directory(tmp_path):
        path.mkdir()
        (path / "app.sql").write_text("-- dump\n")
        yield path


class TestNaming:
    """Tests for the date-formatted base name."""

    def test_default_template(self):
        assert format_base_name("mysqldump_%Y%m%d_%H%M", NOW) == "mysqldump_20240305_1407"

    def test_strips_tar_gz(self):
        assert format_base_name("backup_%Y.tar.gz", NOW) == "backup_2024"

    def test_strips_zip(self):
        assert format_base_name("backup_%Y.zip", NOW) == "backup_2024"

    def test_strips_only_once(self):
        assert strip_archive_suffix("a.zip.zip") == "a.zip"
        assert strip_archive_suffix("a.tar.gz.tar.gz") == "a.tar.gz"

    def test_other_suffixes_kept(self):
        assert strip_archive_suffix("a.tar") == "a.tar"
        assert strip_archive_suffix("a.gz") == "a.gz"

    def test_uses_current_time(self):
        assert format_base_name("%Y") == str(datetime.now().year)


class TestStaging:

    def test_check_existing_raises(self, tmp_path):
        with pytest.raises(StagingError) as exc_info:
            check_staging(tmp_path)
        assert "already exists" in str(exc_info.value)

    def test_check_missing_passes(self, tmp_path):
        check_staging(tmp_path / "new")

    def test_create(self, tmp_path):
        create_staging(tmp_path / "new")
        assert (tmp_path / "new").is_dir()

    def test_create_failure_raises(self, tmp_path):
        with pytest.raises(StagingError):
            create_staging(tmp_path / "missing" / "parent")


class TestArchivePath:

    def test_tar_gz(self):
        finalizer = ArchiveFinalizer(DumpConfig(mode=OutputMode.TAR), FakeRunner())
        assert finalizer.archive_path(Path("base")) == Path("base.tar.gz")

    def test_plain_tar_when_files_gzipped(self):
        finalizer = ArchiveFinalizer(DumpConfig(mode=OutputMode.TAR, compress=True), FakeRunner())
        assert finalizer.archive_path(Path("base")) == Path("base.tar")

    def test_zip(self):
        finalizer = ArchiveFinalizer(DumpConfig(mode=OutputMode.ZIP, compress=True), FakeRunner())
        assert finalizer.archive_path(Path("base")) == Path("base.zip")


class TestCheckTarget:
    """Tests for refusing to reuse an existing archive."""

    def test_existing_tar_gz_raises(self, tmp_path):
        (tmp_path / "base.tar.gz").write_text("previous run")
        finalizer = ArchiveFinalizer(DumpConfig(mode=OutputMode.TAR), FakeRunner())
        with pytest.raises(StagingError) as exc_info:
            finalizer.check_target(tmp_path / "base")
        assert "already exists" in str(exc_info.value)

    def test_existing_zip_raises(self, tmp_path):
        (tmp_path / "base.zip").write_text("previous run")
        finalizer = ArchiveFinalizer(DumpConfig(mode=OutputMode.ZIP), FakeRunner())
        with pytest.raises(StagingError):
            finalizer.check_target(tmp_path / "base")

    def test_other_archive_kind_ignored(self, tmp_path):
        (tmp_path / "base.tar.gz").write_text("previous run")
        finalizer = ArchiveFinalizer(DumpConfig(mode=OutputMode.TAR, compress=True), FakeRunner())
        finalizer.check_target(tmp_path / "base")

    def test_directory_mode_ignored(self, tmp_path):
        (tmp_path / "base.tar.gz").write_text("previous run")
        finalizer = ArchiveFinalizer(DumpConfig(mode=OutputMode.DIRECTORY), FakeRunner())
        finalizer.check_target(tmp_path / "base")


class TestBuildCommand:

    def test_tar_gz(self):
        finalizer = ArchiveFinalizer(DumpConfig(mode=OutputMode.TAR), FakeRunner())
        assert finalizer.build_command(Path("base"), Path("base.tar.gz")) == [
            "tar", "-czf", "base.tar.gz", "base"
        ]

    def test_tar(self):
        finalizer = ArchiveFinalizer(DumpConfig(mode=OutputMode.TAR, compress=True), FakeRunner())
        assert finalizer.build_command(Path("base"), Path("base.tar")) == [
            "tar", "-cf", "base.tar", "base"
        ]

    def test_zip(self):
        finalizer = ArchiveFinalizer(DumpConfig(mode=OutputMode.ZIP), FakeRunner())
        assert finalizer.build_command(Path("base"), Path("base.zip")) == [
            "zip", "-r", "-q", "base.zip", "base"
        ]

    def test_zip_stored(self):
        finalizer = ArchiveFinalizer(DumpConfig(mode=OutputMode.ZIP, compress=True), FakeRunner())
        assert finalizer.build_command(Path("base"), Path("base.zip")) == [
            "zip", "-r", "-q", "-0", "base.zip", "base"
        ]


class TestFinalize:
    """Tests for ArchiveFinalizer.finalize."""

    def test_directory_mode_keeps_files(self, staging):
        runner = FakeRunner()
        result = ArchiveFinalizer(DumpConfig(mode=OutputMode.DIRECTORY), runner).finalize(staging)

        assert result is None
        assert (staging / "app.sql").exists()
        assert runner.commands == []

    def test_tar_removes_staging(self, staging):
        runner = FakeRunner()
        result = ArchiveFinalizer(DumpConfig(mode=OutputMode.TAR), runner).finalize(staging)

        assert result == Path("mysqldump_20240305_1407.tar.gz")
        assert result.exists()
        assert not staging.exists()

    def test_gzipped_files_get_plain_tar(self, staging):
        runner = FakeRunner()
        config = DumpConfig(mode=OutputMode.TAR, compress=True)
        result = ArchiveFinalizer(config, runner).finalize(staging)

        assert result.name == "mysqldump_20240305_1407.tar"
        assert runner.commands[0]['command'][1] == "-cf"

    def test_archiver_failure_keeps_staging(self, staging):
        runner = FakeRunner(archive_status=1)
        with pytest.raises(ArchiveError):
            ArchiveFinalizer(DumpConfig(mode=OutputMode.ZIP), runner).finalize(staging)
        assert (staging / "app.sql").exists()

    def test_archiver_not_found(self, staging):
        runner = FakeRunner()
        runner.run = mock.MagicMock(side_effect=ProcessError("Cannot run zip"))
        with pytest.raises(ArchiveError):
            ArchiveFinalizer(DumpConfig(mode=OutputMode.ZIP), runner).finalize(staging)
        assert staging.exists()

    def test_missing_staging_raises(self, tmp_path):
        finalizer = ArchiveFinalizer(DumpConfig(mode=OutputMode.TAR), FakeRunner())
        with pytest.raises(StagingError) as exc_info:
            finalizer.finalize(tmp_path / "gone")
        assert "missing" in str(exc_info.value)
