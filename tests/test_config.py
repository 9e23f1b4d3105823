"""Unit tests for generator Settings (create_filament.config)."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from create_filament import errors
from create_filament.config import DEFAULT_SKELETONS_DIR, DEFAULT_TEMPLATES_DIR, Settings

pytestmark = pytest.mark.unit


class TestSettingsDefaults:
    def test_template_dirs(self):
        settings = Settings()
        assert settings.templates_dir == DEFAULT_TEMPLATES_DIR
        assert settings.skeletons_dir == DEFAULT_SKELETONS_DIR

    def test_packaged_dirs_exist(self):
        assert DEFAULT_TEMPLATES_DIR.is_dir()
        for tier in ("minimal", "api", "full"):
            assert (DEFAULT_SKELETONS_DIR / tier / "src").is_dir()

    def test_output_dir_is_cwd(self):
        assert Settings().output_dir == Path.cwd()

    def test_timeouts(self):
        settings = Settings()
        assert settings.install_timeout == 600
        assert settings.git_timeout == 60

    def test_zero_timeout_rejected(self):
        with pytest.raises(ValidationError):
            Settings(install_timeout=0)


class TestSettingsPaths:
    def test_project_path(self, tmp_path):
        settings = Settings(output_dir=tmp_path)
        assert settings.project_path("my-api") == (tmp_path / "my-api").resolve()

    def test_skeleton_path(self, tmp_path):
        settings = Settings(skeletons_dir=tmp_path)
        assert settings.skeleton_path("api") == tmp_path / "api"


class TestFromEnv:
    def test_no_env(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings.from_env()
        assert settings.templates_dir == DEFAULT_TEMPLATES_DIR

    def test_reads_env(self, tmp_path):
        env = {
            "CREATE_FILAMENT_TEMPLATES_DIR": str(tmp_path / "t"),
            "CREATE_FILAMENT_SKELETONS_DIR": str(tmp_path / "s"),
            "CREATE_FILAMENT_OUTPUT_DIR": str(tmp_path / "o"),
            "CREATE_FILAMENT_INSTALL_TIMEOUT": "42",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = Settings.from_env()
        assert settings.templates_dir == tmp_path / "t"
        assert settings.skeletons_dir == tmp_path / "s"
        assert settings.output_dir == tmp_path / "o"
        assert settings.install_timeout == 42

    def test_overrides_win(self, tmp_path):
        with patch.dict(os.environ, {"CREATE_FILAMENT_OUTPUT_DIR": "/nowhere"}, clear=True):
            settings = Settings.from_env(output_dir=tmp_path, verbose=True)
        assert settings.output_dir == tmp_path
        assert settings.verbose is True

    @pytest.mark.parametrize("value", ["0", "-5", "abc"])
    def test_bad_timeout_is_scaffold_error(self, value):
        with patch.dict(os.environ, {"CREATE_FILAMENT_INSTALL_TIMEOUT": value}, clear=True):
            with pytest.raises(errors.ValidationError, match="install_timeout"):
                Settings.from_env()
