"""grafe: a static-site build pipeline.

Turns a source tree of markdown content, Jinja2 theme templates and static
assets into a deployable ``public/`` directory, then serves it locally for
preview.

Package Structure
-----------------
- `pipeline/site_builder/`:
    The build stages (path helpers, tree walker, template registry, markdown
    converter, content renderer, asset mirror, script transpiler) and the
    orchestrator that sequences them.
- `config.py`: Fixed site layout and engine settings, as UPPER_SNAKE_CASE.
- `exceptions.py`: The ``AppError`` hierarchy raised by the pipeline.
- `console.py`: Rich output for the command line.
- `build_site.py`: Command-line entrypoint (``grafe``).
"""

__version__ = "0.1.0"
