"""Tests for the theme-builder command line."""

from pathlib import Path

import pytest

from theme_builder.cli.main import help_text, main


@pytest.fixture
def env_root(theme_root: Path, monkeypatch) -> Path:
    monkeypatch.setenv("THEME_ROOT", str(theme_root))
    for key in ("ICONS_DIR", "TEMPLATES_DIR", "BUILD_DIR", "THEME_NAME"):
        monkeypatch.delenv(key, raising=False)
    return theme_root


class TestHelp:
    def test_no_command_prints_everything(self, capsys) -> None:
        assert main([]) == 0

        out = capsys.readouterr().out
        assert "`help`" in out
        assert "`bakeBg.osIcons=N`" in out
        assert "Delete the build folder" in out

    def test_topic(self, capsys) -> None:
        assert main(["help", "clean"]) == 0

        out = capsys.readouterr().out
        assert "Delete the build folder" in out
        assert "bakeBg" not in out

    def test_unknown_topic(self) -> None:
        assert help_text("paint") == "What's that?"

    def test_topic_is_case_insensitive(self) -> None:
        assert help_text(" BUILD ") == help_text("build")


class TestBuildAndClean:
    def test_build(self, env_root: Path) -> None:
        assert main(["build"]) == 0

        build_dir = env_root / "build" / "rEFInd-Minecraft"
        assert (build_dir / "icons" / "os_test.png").is_file()
        assert (build_dir / "theme.conf").is_file()

    def test_baked_build(self, env_root: Path) -> None:
        assert main(["build", "bakeBg", "bakeBg.osIcons=1"]) == 0

        assert (env_root / "build" / "rEFInd-Minecraft" / "background.png").is_file()

    def test_bad_count_fails_before_building(self, env_root: Path) -> None:
        assert main(["build", "bakeBg", "bakeBg.osIcons=many"]) == 1

        assert not (env_root / "build").exists()

    def test_missing_template_fails(self, env_root: Path) -> None:
        (env_root / "templates" / "bg_1080.png").unlink()

        assert main(["build"]) == 1

    def test_clean(self, env_root: Path) -> None:
        assert main(["build"]) == 0
        assert main(["clean"]) == 0
        assert not (env_root / "build" / "rEFInd-Minecraft").exists()

        assert main(["clean"]) == 0

    @pytest.mark.parametrize("key, value", [("ICON_TINT_ALPHA", "2.0"), ("SELECTION_SMALL_SIZE", "0")])
    def test_out_of_range_env_fails_before_building(self, env_root: Path, monkeypatch, key: str, value: str) -> None:
        monkeypatch.setenv(key, value)

        assert main(["build"]) == 1

        assert not (env_root / "build").exists()
