"""Toto theme: bundled layout, scaffold pages and stylesheet.

User templates (``templates/``) take priority.  The bundled directory is
appended to chirp's template search path, so apps may override any
``toto/*.html`` file or extend ``toto/layout.html`` from their own pages.

Thread Safety:
    All returned values are read-only paths.  Safe for free-threading.

"""

from __future__ import annotations

from pathlib import Path

# URL segment (under the route prefix) the bundled assets are served from
ASSET_URL_SEGMENT = "toto"


def _bundled_theme_path() -> Path:
    """Return the absolute path to the bundled default theme."""
    return Path(__file__).parent / "default"


def bundled_template_dir() -> Path:
    """Directory holding ``toto/layout.html``, ``toto/plural.html`` and friends."""
    return _bundled_theme_path() / "templates"


def bundled_asset_dir() -> Path:
    """Directory holding ``toto.css``."""
    return _bundled_theme_path() / "assets"


def get_template_dirs(user_dir: Path) -> list[Path]:
    """Return template directories in priority order.

    Returns:
        ``[user_templates_dir, bundled_default_templates]``

    The user directory is included even if it does not exist yet.

    """
    bundled = bundled_template_dir()
    dirs: list[Path] = []
    if user_dir != bundled:
        dirs.append(user_dir)
    dirs.append(bundled)
    return dirs
