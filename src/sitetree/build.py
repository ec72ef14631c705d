"""Full site build.

Wires configuration, template, content tree, assets and the render
pipeline together. Every build starts from an empty output directory.
"""

import logging
from pathlib import Path
from typing import cast

from sitetree.assets import copy_tree
from sitetree.config import Config
from sitetree.core.pipeline import BuildReport, Collaborators, SitePipeline, prepare_output_root
from sitetree.core.renderer import MarkdownRenderer
from sitetree.core.templates import HeaderFooterTemplate, JinjaPageTemplate, PageTemplate
from sitetree.core.tree import TreeBuilder

logger = logging.getLogger(__name__)


def load_template(config: Config) -> PageTemplate:
    """Parse the configured page template once.

    Raises:
        FatalIOError: If template files cannot be read
        TemplatingError: If the Jinja2 template is invalid
    """
    templates = config.templates
    if templates.template is not None:
        return JinjaPageTemplate.parse(templates.template)
    # header and footer presence is checked by Config.validate()
    return HeaderFooterTemplate.parse(cast(Path, templates.header), cast(Path, templates.footer))


def build_site(config: Config) -> BuildReport:
    """Build the whole site described by config.

    Args:
        config: Application configuration

    Returns:
        BuildReport for the run

    Raises:
        ConfigError: If configuration is incomplete
        FatalIOError: If content, template or output cannot be used
        TemplatingError: If the template cannot be parsed
    """
    config.validate()
    content_dir = cast(Path, config.content_dir)  # narrowing after validate()

    template = load_template(config)

    logger.info(f"Scanning {content_dir} ({', '.join(config.accepted_extensions)})")
    root = TreeBuilder(config.accepted_extensions).build(content_dir)

    prepare_output_root(config.output_dir)

    assets_source = config.templates.assets_source()
    if assets_source is not None:
        copy_tree(assets_source, config.output_dir / "assets")

    collaborators = Collaborators(converter=MarkdownRenderer(), template=template)
    logger.info("Generating pages")
    report = SitePipeline(root, content_dir, config.output_dir, collaborators).render()
    logger.info(f"Done! Output in {config.output_dir}")
    return report
