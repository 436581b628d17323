"""Toto configuration.

TotoConfig is the central configuration object, frozen after creation.
"""

import importlib
from dataclasses import dataclass, field
from pathlib import Path

from toto._errors import ConfigurationError
from toto._types import ModelFactory
from toto.model import Model


@dataclass(frozen=True, slots=True)
class TotoConfig:
    """Configuration for a toto application.

    Attributes:
        root: Application root (contains templates/).  Always resolved to
              an absolute path on construction.
        prefix: Path prefix prepended to every generated route.
        namespace: Dotted module path holding convention-named controller
            classes (``myapp.controllers``), or *None* to skip discovery.
        model_class: Factory called with the instance key, or a
            ``module:attr`` string naming one.
        templates_dir: Directory containing the app's kida templates.
        instance_templates: Resolve instance templates per request so that
            ``{object}/{key}/{action}.html`` overrides are honoured.
        host: Bind address for ``toto serve``.
        port: Bind port for ``toto serve``.
        debug: Run chirp in debug mode.

    """

    root: Path = field(default_factory=Path.cwd)
    prefix: str = ""
    namespace: str | None = None
    model_class: ModelFactory | str = Model
    templates_dir: str = "templates"
    instance_templates: bool = False
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.root, Path):
            object.__setattr__(self, "root", Path(self.root))
        if not self.root.is_absolute():
            object.__setattr__(self, "root", self.root.resolve())
        # Normalize prefix to "" or "/segment[/segment...]"
        prefix = self.prefix.strip("/")
        object.__setattr__(self, "prefix", f"/{prefix}" if prefix else "")
        if isinstance(self.model_class, str):
            object.__setattr__(self, "model_class", _import_attr(self.model_class))
        if not callable(self.model_class):
            msg = f"model_class must be callable, got {self.model_class!r}"
            raise ConfigurationError(msg)

    @property
    def templates_path(self) -> Path:
        """Absolute path to templates directory."""
        return self.root / self.templates_dir

    @property
    def model_factory(self) -> ModelFactory:
        """Callable building the instance value object from a key."""
        return self.model_class  # type: ignore[return-value]


def _import_attr(spec: str) -> object:
    """Resolve ``package.module:attr``."""
    module_part, _, attr = spec.partition(":")
    if not module_part or not attr:
        msg = f"Expected 'module:attr', got {spec!r}"
        raise ConfigurationError(msg)
    try:
        module = importlib.import_module(module_part)
    except ImportError as exc:
        msg = f"Cannot import {module_part!r} for {spec!r}: {exc}"
        raise ConfigurationError(msg) from exc
    try:
        return getattr(module, attr)
    except AttributeError as exc:
        msg = f"{module_part!r} has no attribute {attr!r}"
        raise ConfigurationError(msg) from exc
