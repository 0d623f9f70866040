"""Site builder pipeline package.

Re-exports the public API of the build stages so orchestrators, scripts and
tests can import from one place. No logic lives here.

Examples
--------
>>> from grafe.pipeline.site_builder import build_site
>>> stats = build_site(Path("my-site"))  # doctest: +SKIP
>>> stats.pages_rendered  # doctest: +SKIP
4
"""

from .assets import copy_file, mirror_tree
from .converter import ConversionResult, MarkdownConverter
from .paths import (
    add_extension,
    change_extension,
    ensure_parent_dirs,
    extension_of,
    mirror_path,
    remove_extension,
)
from .renderer import (
    PageMetadata,
    convert_content_tree,
    extract_page_metadata,
    render_content_file,
)
from .runner import (
    BuildStats,
    build_site,
    configure_logging,
    run_from_config,
    try_build_site,
)
from .templates import TemplateSet, load_templates
from .transpiler import EsbuildTranspiler, transpile_scripts
from .walker import iter_files, walk

__all__ = [
    "BuildStats",
    "ConversionResult",
    "EsbuildTranspiler",
    "MarkdownConverter",
    "PageMetadata",
    "TemplateSet",
    "add_extension",
    "build_site",
    "change_extension",
    "configure_logging",
    "convert_content_tree",
    "copy_file",
    "ensure_parent_dirs",
    "extension_of",
    "iter_files",
    "load_templates",
    "mirror_path",
    "mirror_tree",
    "remove_extension",
    "render_content_file",
    "run_from_config",
    "transpile_scripts",
    "try_build_site",
    "walk",
]
