"""Tests for configuration loading."""

from pathlib import Path

import pytest
from sitetree.config import DEFAULT_OUTPUT_DIR, Config, TemplateConfig
from sitetree.errors import ConfigError, FatalIOError


class TestConfigLoadKeyValue:
    """Tests for Config.load() with key=value files."""

    def test__all_keys__parsed_relative_to_config(self, tmp_path: Path) -> None:
        """Paths are resolved against the config file's directory."""
        config_file = tmp_path / "site.conf"
        config_file.write_text(
            "content=docs\noutput=public\ntemplate=theme/page.html\nassets=theme/static\npassthrough=.htm\n"
        )

        config = Config.load(config_file)

        assert config.content_dir == tmp_path / "docs"
        assert config.output_dir == tmp_path / "public"
        assert config.templates.template == tmp_path / "theme" / "page.html"
        assert config.templates.assets == tmp_path / "theme" / "static"
        assert config.passthrough == [".htm"]
        assert config.config_path == config_file

    def test__comments_blank_lines_and_unknown_keys__ignored(self, tmp_path: Path) -> None:
        """Only recognised key=value lines matter."""
        config_file = tmp_path / "site.conf"
        config_file.write_text("# comment\n\nnonsense line\ncolor=blue\ncontent=docs\n")

        config = Config.load(config_file)

        assert config.content_dir == tmp_path / "docs"
        assert config.templates == TemplateConfig()

    def test__whitespace_and_quotes__trimmed(self, tmp_path: Path) -> None:
        """Keys and values are trimmed; surrounding quotes are removed."""
        config_file = tmp_path / "site.conf"
        config_file.write_text('  header = "theme/h.html" \nfooter=\'theme/f.html\'\n')

        config = Config.load(config_file)

        assert config.templates.header == tmp_path / "theme" / "h.html"
        assert config.templates.footer == tmp_path / "theme" / "f.html"
        assert config.templates.uses_header_footer

    def test__output_default__next_to_config(self, tmp_path: Path) -> None:
        """Output defaults to output_site beside the config file."""
        config_file = tmp_path / "site.conf"
        config_file.write_text("content=docs\n")

        assert Config.load(config_file).output_dir == tmp_path / DEFAULT_OUTPUT_DIR

    def test__passthrough_list__normalized(self, tmp_path: Path) -> None:
        """Extensions get a leading dot and duplicates are dropped."""
        config_file = tmp_path / "site.conf"
        config_file.write_text("passthrough=htm, .txt,.htm,\n")

        config = Config.load(config_file)

        assert config.passthrough == [".htm", ".txt"]
        assert config.accepted_extensions == (".md", ".htm", ".txt")

    def test__missing_file__raises_fatal(self, tmp_path: Path) -> None:
        """Fail when the config file does not exist."""
        with pytest.raises(FatalIOError, match="Configuration file not found"):
            Config.load(tmp_path / "none.conf")


class TestConfigLoadToml:
    """Tests for Config.load() with TOML files."""

    def test__site_table__parsed(self, tmp_path: Path) -> None:
        """Keys are read from the [site] table."""
        config_file = tmp_path / "sitetree.toml"
        config_file.write_text(
            '[site]\ncontent = "docs"\ntemplate = "page.html"\npassthrough = ["htm"]\n'
        )

        config = Config.load(config_file)

        assert config.content_dir == tmp_path / "docs"
        assert config.templates.template == tmp_path / "page.html"
        assert config.passthrough == [".htm"]

    def test__top_level_keys__parsed(self, tmp_path: Path) -> None:
        """Without a [site] table, top-level keys are used."""
        config_file = tmp_path / "sitetree.toml"
        config_file.write_text('content = "docs"\n')

        assert Config.load(config_file).content_dir == tmp_path / "docs"

    def test__invalid_toml__raises_config_error(self, tmp_path: Path) -> None:
        config_file = tmp_path / "sitetree.toml"
        config_file.write_text("content = \n")

        with pytest.raises(ConfigError, match="Invalid TOML"):
            Config.load(config_file)

    def test__non_string_path__raises_config_error(self, tmp_path: Path) -> None:
        config_file = tmp_path / "sitetree.toml"
        config_file.write_text("[site]\ncontent = 3\n")

        with pytest.raises(ConfigError, match="content must be a string"):
            Config.load(config_file)


class TestConfigValidate:
    """Tests for Config.validate()."""

    def test__complete__passes(self, tmp_path: Path) -> None:
        config = Config(
            content_dir=tmp_path / "docs",
            output_dir=tmp_path / "out",
            templates=TemplateConfig(template=tmp_path / "t.html"),
        )

        config.validate()

    def test__missing_content__raises(self, tmp_path: Path) -> None:
        config = Config(content_dir=None, templates=TemplateConfig(template=tmp_path / "t.html"))

        with pytest.raises(ConfigError, match="content root required"):
            config.validate()

    def test__missing_template__raises(self, tmp_path: Path) -> None:
        """Either template or header plus footer is required."""
        config = Config(
            content_dir=tmp_path / "docs",
            output_dir=tmp_path / "out",
            templates=TemplateConfig(header=tmp_path / "h.html"),
        )

        with pytest.raises(ConfigError, match="'template' or both 'header' and 'footer'"):
            config.validate()

    @pytest.mark.parametrize("output", [".", ".."])
    def test__output_contains_content__raises(self, tmp_path: Path, output: str) -> None:
        """Wiping the output root must never delete the content."""
        config = Config(
            content_dir=tmp_path / "docs",
            output_dir=tmp_path / "docs" / output,
            templates=TemplateConfig(template=tmp_path / "t.html"),
        )

        with pytest.raises(ConfigError, match="must not contain the content root"):
            config.validate()

    @pytest.mark.parametrize("output", ["_site", "nested/_site"])
    def test__output_inside_content__raises(self, tmp_path: Path, output: str) -> None:
        """Output below the content root would be scanned on the next run."""
        config = Config(
            content_dir=tmp_path / "docs",
            output_dir=tmp_path / "docs" / output,
            templates=TemplateConfig(template=tmp_path / "t.html"),
        )

        with pytest.raises(ConfigError, match="must not be inside the content root"):
            config.validate()

    def test__content_dot_default_output__raises(self, tmp_path: Path) -> None:
        """The default output lands inside a content root of '.'."""
        config_file = tmp_path / "site.conf"
        config_file.write_text("content=.\ntemplate=t.html\n")

        config = Config.load(config_file)

        with pytest.raises(ConfigError, match="must not be inside the content root"):
            config.validate()


class TestConfigWithOverrides:
    """Tests for Config.with_overrides()."""

    def test__overrides__applied_without_mutation(self, tmp_path: Path) -> None:
        """Only given values change; the original is untouched."""
        original = Config(content_dir=tmp_path / "a", templates=TemplateConfig(template=tmp_path / "t"))

        updated = original.with_overrides(content_dir=tmp_path / "b", template=tmp_path / "u")

        assert updated.content_dir == tmp_path / "b"
        assert updated.templates.template == tmp_path / "u"
        assert updated.output_dir == original.output_dir
        assert original.content_dir == tmp_path / "a"
        assert original.templates.template == tmp_path / "t"

    def test__assets_source__defaults_next_to_template(self, tmp_path: Path) -> None:
        templates = TemplateConfig(template=tmp_path / "theme" / "page.html")

        assert templates.assets_source() == tmp_path / "theme" / "assets"
