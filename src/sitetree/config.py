"""Configuration management for sitetree.

Supports two formats: plain key=value files and TOML (``*.toml``, keys in
a ``[site]`` table). Relative paths are resolved against the directory
containing the configuration file.

Recognised keys:
    content      content root directory
    output       output root directory (default: output_site)
    template     Jinja2 page template
    header       header file (used with footer when no template is set)
    footer       footer file
    assets       assets directory copied to <output>/assets
                 (default: "assets" next to the template or header)
    passthrough  comma-separated extra extensions copied without
                 conversion (e.g., ".htm")
"""

import logging
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

from sitetree.core.paths import SOURCE_EXTENSION
from sitetree.errors import ConfigError, FatalIOError

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = "output_site"
PATH_KEYS = ("content", "output", "template", "header", "footer", "assets")


@dataclass
class TemplateConfig:
    """Page template configuration."""

    template: Path | None = None
    header: Path | None = None
    footer: Path | None = None
    assets: Path | None = None

    @property
    def uses_header_footer(self) -> bool:
        return self.template is None and self.header is not None and self.footer is not None

    def assets_source(self) -> Path | None:
        """Directory to copy into the output's assets folder."""
        if self.assets is not None:
            return self.assets
        anchor = self.template or self.header
        if anchor is None:
            return None
        return anchor.parent / "assets"


@dataclass
class Config:
    """Application configuration."""

    content_dir: Path | None
    output_dir: Path = field(default_factory=lambda: Path(DEFAULT_OUTPUT_DIR))
    templates: TemplateConfig = field(default_factory=TemplateConfig)
    passthrough: list[str] = field(default_factory=list)
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path) -> "Config":
        """Load configuration from file.

        Args:
            config_path: Path to a key=value or TOML configuration file

        Returns:
            Config instance; call validate() before building

        Raises:
            FatalIOError: If the file cannot be read
            ConfigError: If the file content is invalid
        """
        if not config_path.is_file():
            raise FatalIOError(f"Configuration file not found: {config_path}")

        if config_path.suffix == ".toml":
            data = cls._read_toml(config_path)
        else:
            data = cls._read_pairs(config_path)

        config = cls._from_dict(data, config_path.parent)
        config.config_path = config_path
        return config

    @classmethod
    def _read_pairs(cls, path: Path) -> dict[str, str]:
        """Parse key=value lines.

        Blank lines and lines starting with '#' are skipped, as are lines
        without '='. Keys and values are trimmed and matching surrounding
        quotes are removed from values.

        Args:
            path: Configuration file

        Returns:
            Mapping of keys to raw string values
        """
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise FatalIOError(f"Cannot read configuration file {path}: {e}") from e

        data: dict[str, str] = {}
        for line in text.splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            key, sep, value = line.partition("=")
            if not sep:
                continue
            value = value.strip()
            if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
                value = value[1:-1]
            data[key.strip()] = value
        return data

    @classmethod
    def _read_toml(cls, path: Path) -> dict[str, object]:
        """Read the [site] table of a TOML file (or its top level)."""
        try:
            with path.open("rb") as f:
                data = tomllib.load(f)
        except OSError as e:
            raise FatalIOError(f"Cannot read configuration file {path}: {e}") from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {path}: {e}") from e

        site = data.get("site", data)
        if not isinstance(site, dict):
            raise ConfigError("site section must be a table")
        return site

    @classmethod
    def _from_dict(cls, data: dict[str, object], config_dir: Path) -> "Config":
        """Create Config from parsed key/value data.

        Unknown keys are ignored.
        """
        paths: dict[str, Path | None] = {}
        for key in PATH_KEYS:
            value = data.get(key)
            if value is None or value == "":
                paths[key] = None
                continue
            if not isinstance(value, str):
                raise ConfigError(f"{key} must be a string")
            paths[key] = config_dir / value

        return cls(
            content_dir=paths["content"],
            output_dir=paths["output"] or config_dir / DEFAULT_OUTPUT_DIR,
            templates=TemplateConfig(
                template=paths["template"],
                header=paths["header"],
                footer=paths["footer"],
                assets=paths["assets"],
            ),
            passthrough=cls._parse_extensions(data.get("passthrough")),
        )

    @classmethod
    def _parse_extensions(cls, value: object) -> list[str]:
        """Parse passthrough extensions from a comma list or TOML array."""
        if value is None:
            return []
        if isinstance(value, str):
            items = value.split(",")
        elif isinstance(value, list) and all(isinstance(item, str) for item in value):
            items = value
        else:
            raise ConfigError("passthrough must be a comma-separated string or a list of strings")

        extensions: list[str] = []
        for item in items:
            item = item.strip()
            if not item:
                continue
            extension = item if item.startswith(".") else f".{item}"
            if extension not in extensions:
                extensions.append(extension)
        return extensions

    @property
    def accepted_extensions(self) -> tuple[str, ...]:
        """Extensions of files included in the site."""
        extensions = [SOURCE_EXTENSION]
        extensions.extend(ext for ext in self.passthrough if ext != SOURCE_EXTENSION)
        return tuple(extensions)

    def validate(self) -> None:
        """Check required settings before any tree work.

        Raises:
            ConfigError: If required keys are missing or paths conflict
        """
        if self.content_dir is None:
            raise ConfigError("content root required (via CONTENT_DIR argument or 'content' key)")

        templates = self.templates
        if templates.template is None and (templates.header is None or templates.footer is None):
            raise ConfigError("either 'template' or both 'header' and 'footer' must be configured")
        if templates.template is not None and (templates.header is not None or templates.footer is not None):
            logger.warning("Both 'template' and 'header'/'footer' configured; using template")

        content = self.content_dir.resolve()
        output = self.output_dir.resolve()
        if content == output or content.is_relative_to(output):
            raise ConfigError(f"output directory {self.output_dir} must not contain the content root")
        if output.is_relative_to(content):
            raise ConfigError(f"output directory {self.output_dir} must not be inside the content root")

    def with_overrides(
        self,
        *,
        content_dir: Path | None = None,
        output_dir: Path | None = None,
        template: Path | None = None,
    ) -> "Config":
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            content_dir: Override content
            output_dir: Override output
            template: Override template

        Returns:
            New Config instance with overrides applied
        """
        templates = self.templates
        if template is not None:
            templates = replace(self.templates, template=template)

        return replace(
            self,
            content_dir=content_dir if content_dir is not None else self.content_dir,
            output_dir=output_dir if output_dir is not None else self.output_dir,
            templates=templates,
        )
