# SPDX-License-Identifier: MIT
"""Tests for build configuration module."""

from pathlib import Path

import pytest

from jsdist_build.config import (
    DEFAULT_TARGETS,
    BuildConfig,
    BuildConfigError,
    TargetOptions,
)


class TestBuildConfig:
    """Tests for BuildConfig class."""

    def test_defaults(self):
        config = BuildConfig()
        assert config.bundle is True
        assert config.format == "esm"
        assert config.exports_as_indexes is False
        assert config.targets == DEFAULT_TARGETS
        assert config.output_dir == Path("dist")
        assert config.jsr_name is None

    def test_default_targets_not_shared(self):
        config = BuildConfig()
        config.targets.append("jsr")
        assert BuildConfig().targets == ["dev", "npm"]

    def test_invalid_format(self):
        with pytest.raises(BuildConfigError, match="Invalid format 'umd'"):
            BuildConfig(format="umd")

    def test_invalid_target(self):
        with pytest.raises(BuildConfigError, match="Invalid target"):
            BuildConfig(targets=["dev", "deno"])

    def test_indexes_require_bundle(self):
        with pytest.raises(BuildConfigError, match="requires bundled output"):
            BuildConfig(bundle=False, exports_as_indexes=True)

    def test_output_dir_coerced_to_path(self):
        assert BuildConfig(output_dir="out").output_dir == Path("out")  # type: ignore[arg-type]


class TestTargetOptions:
    """Tests for per-target option derivation."""

    def test_dev(self):
        assert BuildConfig().target_options("dev") == TargetOptions(
            target="dev", is_production=False, force_private=True, process_ts_exports=True
        )

    def test_npm(self):
        options = BuildConfig().target_options("npm")
        assert options.is_production is True
        assert options.force_private is False
        assert options.process_ts_exports is True
        assert options.name is None

    def test_jsr(self):
        options = BuildConfig(jsr_name="@scope/lib").target_options("jsr")
        assert options.is_production is True
        assert options.process_ts_exports is False
        assert options.name == "@scope/lib"

    def test_unknown_target(self):
        with pytest.raises(BuildConfigError, match="Invalid target 'web'"):
            BuildConfig().target_options("web")

    def test_target_output_dir(self, tmp_path: Path):
        config = BuildConfig()
        assert config.target_output_dir(tmp_path, "npm") == tmp_path / "dist" / "npm"

    def test_absolute_output_dir(self, tmp_path: Path):
        config = BuildConfig(output_dir=tmp_path / "out")
        assert config.target_output_dir("/elsewhere", "dev") == tmp_path / "out" / "dev"


class TestBuildConfigFromDict:
    """Tests for BuildConfig.from_dict method."""

    def test_empty(self):
        assert BuildConfig.from_dict({}) == BuildConfig()

    def test_full(self):
        config = BuildConfig.from_dict(
            {
                "build": {
                    "bundle": True,
                    "format": "cjs",
                    "exports_as_indexes": True,
                    "targets": ["npm", "jsr"],
                    "output_dir": "build",
                    "jsr_name": "@scope/lib",
                }
            }
        )
        assert config.format == "cjs"
        assert config.exports_as_indexes is True
        assert config.targets == ["npm", "jsr"]
        assert config.output_dir == Path("build")
        assert config.jsr_name == "@scope/lib"

    def test_unknown_option(self):
        with pytest.raises(BuildConfigError, match=r"Unknown option: \[build\].minify"):
            BuildConfig.from_dict({"build": {"minify": True}})

    def test_wrong_type(self):
        with pytest.raises(BuildConfigError, match="must be bool, got str"):
            BuildConfig.from_dict({"build": {"bundle": "yes"}})

    def test_build_not_table(self):
        with pytest.raises(BuildConfigError, match="must be a table"):
            BuildConfig.from_dict({"build": "esm"})


class TestBuildConfigLoad:
    """Tests for loading jsdist.toml."""

    def test_missing_file_gives_defaults(self, tmp_path: Path):
        assert BuildConfig.load(tmp_path) == BuildConfig()

    def test_load_file(self, tmp_path: Path):
        (tmp_path / "jsdist.toml").write_text('[build]\nformat = "cjs"\ntargets = ["npm"]\n')
        config = BuildConfig.load(tmp_path)
        assert config.format == "cjs"
        assert config.targets == ["npm"]

    def test_invalid_toml(self, tmp_path: Path):
        (tmp_path / "jsdist.toml").write_text("[build\n")
        with pytest.raises(BuildConfigError, match="Invalid TOML syntax"):
            BuildConfig.load(tmp_path)

    def test_from_toml_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            BuildConfig.from_toml(tmp_path / "jsdist.toml")
