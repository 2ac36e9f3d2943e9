"""Tests for build.yaml loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from vips_mxe_build.errors import BuildConfigError
from vips_mxe_build.settings import BuildSettings, load_settings, settings_from_dict

REPO_CONFIG = Path(__file__).resolve().parent.parent / "build.yaml"


def test_missing_default_config_uses_defaults(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path,
) -> None:
    monkeypatch.chdir(tmp_path)
    assert load_settings() == BuildSettings()


def test_missing_explicit_config_fails(tmp_path: Path) -> None:
    with pytest.raises(BuildConfigError, match="not found"):
        load_settings(tmp_path / "missing.yaml")


def test_empty_config_uses_defaults(tmp_path: Path) -> None:
    cfg = tmp_path / "build.yaml"
    cfg.write_text("", encoding="utf-8")
    assert load_settings(cfg) == BuildSettings()


def test_invalid_yaml(tmp_path: Path) -> None:
    cfg = tmp_path / "build.yaml"
    cfg.write_text("image: [unclosed\n", encoding="utf-8")
    with pytest.raises(BuildConfigError, match="Invalid YAML"):
        load_settings(cfg)


def test_partial_config_overrides(tmp_path: Path) -> None:
    cfg = tmp_path / "build.yaml"
    cfg.write_text(
        "image:\n  name: my-image\n"
        "runtime:\n  preferred: Podman\n"
        "paths:\n  work_dir: out\n  data_dir: /work/\n"
        "targets:\n  architectures: [x86_64]\n",
        encoding="utf-8",
    )
    settings = load_settings(cfg)
    assert settings.image_name == "my-image"
    assert settings.preferred_runtime == "podman"
    assert settings.work_dir == Path("out")
    assert settings.data_dir == "/work"
    assert settings.packaging_path == Path("out/packaging")
    assert settings.architectures == ("x86_64",)
    assert settings.base_plugins == BuildSettings().base_plugins


def test_repo_config_matches_defaults() -> None:
    settings = load_settings(REPO_CONFIG)
    defaults = BuildSettings()
    assert settings.architectures == defaults.architectures
    assert settings.base_plugins == (
        "/usr/local/mxe/plugins/apps",
        "/usr/local/mxe/plugins/native",
        "plugins/llvm-mingw",
        "plugins/zlib-ng",
        "plugins/proxy-libintl",
    )
    assert settings.hevc_plugin == "plugins/hevc-deps"


@pytest.mark.parametrize(
    ("conf", "match"),
    [
        ({"image": ["not", "a", "mapping"]}, "must be a mapping"),
        ({"runtime": {"preferred": "lxc"}}, "Unsupported container runtime"),
        ({"targets": {"architectures": "x86_64"}}, "must be a list"),
        ({"plugins": {"base": []}}, "must not be empty"),
    ],
)
def test_bad_sections(conf: dict, match: str) -> None:
    with pytest.raises(BuildConfigError, match=match):
        settings_from_dict(conf)


@pytest.mark.parametrize(
    "base",
    [
        ["plugins/zlib-ng", "plugins/hevc-deps"],
        ["plugins/zlib-ng", "/data/plugins/hevc-deps/"],
    ],
)
def test_hevc_plugin_in_base_rejected(base: list[str]) -> None:
    with pytest.raises(BuildConfigError, match="HEVC plugin"):
        settings_from_dict({"plugins": {"base": base}})


def test_custom_hevc_plugin_in_base_rejected() -> None:
    conf = {
        "paths": {"data_dir": "/work"},
        "plugins": {"base": ["/work/plugins/x265"], "hevc": "plugins/x265"},
    }
    with pytest.raises(BuildConfigError, match="/work/plugins/x265"):
        settings_from_dict(conf)


@pytest.mark.parametrize(
    ("conf", "key"),
    [
        ({"image": {"build": "false"}}, "image.build"),
        ({"cli": {"quiet": "no"}}, "cli.quiet"),
        ({"cli": {"verbose": 1}}, "cli.verbose"),
        ({"cli": {"progress": None}}, "cli.progress"),
    ],
)
def test_non_bool_flags_rejected(conf: dict, key: str) -> None:
    with pytest.raises(BuildConfigError, match=key):
        settings_from_dict(conf)


def test_real_bools_accepted(tmp_path: Path) -> None:
    cfg = tmp_path / "build.yaml"
    cfg.write_text("image:\n  build: true\ncli:\n  quiet: yes\n  progress: off\n", encoding="utf-8")
    settings = load_settings(cfg)
    assert settings.build_image is True
    assert settings.quiet is True
    assert settings.progress is False
