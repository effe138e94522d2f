"""
Unit tests for filename_codec.py
"""

from datetime import datetime

import pytest

from dbsync.filename_codec import (
    backup_filename,
    encode_filename,
    parse_filename,
    environment_label,
    environment_slug,
    slugify,
    unslugify,
)
from dbsync.models import FilenameFormat


class TestEncodeFilename:
    """Tests for encode_filename."""

    def test_basic(self):
        when = datetime(2025, 8, 25, 14, 30, 22)
        assert encode_filename("Development", "Local", when) == "250825-143022-development-local.sql"

    def test_multi_word_preset(self):
        when = datetime(2025, 8, 25, 14, 30, 22)
        assert encode_filename("Content Only", "Remote", when) == "250825-143022-content-only-remote.sql"

    def test_backup(self):
        when = datetime(2025, 1, 2, 3, 4, 5)
        assert encode_filename("Custom", "Local", when, backup=True) == "250102-030405-custom-local-BAK.sql"

    def test_defaults_to_now(self):
        filename = encode_filename("Development", "Local")
        info = parse_filename(filename)
        assert info.format == FilenameFormat.TIMESTAMPED
        assert info.created_at.date() == datetime.now().date()


class TestBackupFilename:
    """Tests for backup_filename."""

    def test_inserts_suffix_before_extension(self):
        assert backup_filename("250825-143022-development-local.sql") == "250825-143022-development-local-BAK.sql"

    def test_only_final_extension_replaced(self):
        assert backup_filename("my.sql.dump.sql") == "my.sql.dump-BAK.sql"

    def test_deterministic(self):
        name = "250825-143022-content-only-remote.sql"
        assert backup_filename(name) == backup_filename(name)


class TestParseFilename:
    """Tests for parse_filename."""

    def test_timestamped(self):
        info = parse_filename("250825-143022-development-local.sql")
        assert info.format == FilenameFormat.TIMESTAMPED
        assert info.date == "250825"
        assert info.time == "143022"
        assert info.timestamp == "250825-143022"
        assert info.preset == "Development"
        assert info.environment == "Local"
        assert info.is_backup is False
        assert info.created_at == datetime(2025, 8, 25, 14, 30, 22)

    def test_timestamped_backup(self):
        info = parse_filename("250825-143022-development-local-BAK.sql")
        assert info.format == FilenameFormat.TIMESTAMPED
        assert info.environment == "Local"
        assert info.is_backup is True

    def test_preset_with_dash(self):
        info = parse_filename("250825-143022-content-only-remote-BAK.sql")
        assert info.preset == "Content Only"
        assert info.preset_slug == "content-only"
        assert info.environment == "Remote"
        assert info.is_backup is True

    def test_legacy(self):
        info = parse_filename("250825-development-local.sql")
        assert info.format == FilenameFormat.LEGACY
        assert info.time == "000000"
        assert info.timestamp == "250825-000000"
        assert info.preset == "Development"
        assert info.environment == "Local"
        assert info.is_backup is False

    def test_legacy_backup(self):
        info = parse_filename("250825-development-local-BAK.sql")
        assert info.format == FilenameFormat.LEGACY
        assert info.is_backup is True

    @pytest.mark.parametrize("filename", [
        "backup.sql",
        "random-name.txt",
        "",
        "2508-143022-development-local.sql",
        "250825-143022.sql",
    ])
    def test_unknown(self, filename):
        info = parse_filename(filename)
        assert info.format == FilenameFormat.UNKNOWN
        assert info.preset == "Unknown"
        assert info.environment == "Unknown"
        assert info.timestamp == "Unknown"
        assert info.is_backup is False

    def test_invalid_calendar_date_still_parses(self):
        info = parse_filename("999999-999999-development-local.sql")
        assert info.format == FilenameFormat.TIMESTAMPED
        assert info.created_at is None

    @pytest.mark.parametrize("preset,environment,backup", [
        ("Development", "Local", False),
        ("Content Only", "Remote", True),
        ("Custom", "Local", True),
        ("Content Only", "Staging Server", False),
    ])
    def test_encode_then_decode(self, preset, environment, backup):
        when = datetime(2024, 12, 31, 23, 59, 58)
        info = parse_filename(encode_filename(preset, environment, when, backup=backup))
        assert info.preset == preset
        assert info.environment == environment
        assert info.created_at == when
        assert info.timestamp == "241231-235958"
        assert info.is_backup is backup


class TestSlugs:
    """Tests for slug helpers."""

    def test_slugify(self):
        assert slugify("Content Only") == "content-only"
        assert slugify("  Development ") == "development"

    def test_unslugify(self):
        assert unslugify("content-only") == "Content Only"

    @pytest.mark.parametrize("environment,slug", [
        ("Local", "local"),
        ("Staging Server", "staging_server"),
        ("pre-prod", "pre_prod"),
        ("  QA  Box ", "qa_box"),
    ])
    def test_environment_slug_has_no_dashes(self, environment, slug):
        assert environment_slug(environment) == slug
        assert "-" not in environment_slug(environment)

    def test_environment_label(self):
        assert environment_label("staging_server") == "Staging Server"
        assert environment_label("local") == "Local"

    def test_dashed_environment_keeps_preset_intact(self):
        filename = encode_filename("Content Only", "pre-prod", datetime(2024, 1, 1))
        assert filename == "240101-000000-content-only-pre_prod.sql"
        info = parse_filename(filename)
        assert info.preset == "Content Only"
        assert info.environment == "Pre Prod"
