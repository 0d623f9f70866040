"""Build the static site in the current directory and preview it.

Reads ``content/``, ``theme/`` and ``static/`` from the working directory,
writes the finished site to ``public/`` and then serves it on
http://localhost:8081/ until interrupted. The build takes no options; the
only flag controls logging verbosity. Logs also go to
``logs/build_site.log`` unless ``DISABLE_FILE_LOGS`` is set.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from grafe.config import OUTPUT_DIR, PREVIEW_HOST, PREVIEW_PORT
from grafe.console import print_build_summary, print_failure, print_server_banner
from grafe.pipeline.site_builder.runner import configure_logging, try_build_site
from grafe.pipeline.site_builder.server import preview_url, serve


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Build the static site in the current directory and serve it."
    )
    parser.add_argument("--log-level", type=str, default="INFO")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint: build, print the summary, then serve ``public/``.

    Returns
    -------
    int
        ``1`` if the build failed (the server is not started), otherwise
        ``0`` once the server has been stopped.
    """
    args = parse_args(argv)
    configure_logging(args.log_level, enable_file=True)
    site_root = Path.cwd()
    stats = try_build_site(site_root)
    if stats is None:
        print_failure("see the log above for details")
        return 1
    print_build_summary(stats)

    output_root = site_root / OUTPUT_DIR
    print_server_banner(preview_url(PREVIEW_HOST, PREVIEW_PORT), str(OUTPUT_DIR))
    serve(output_root, PREVIEW_HOST, PREVIEW_PORT)
    return 0


if __name__ == "__main__":
    sys.exit(main())
