"""Default instance value object."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Model:
    """Wraps the key of the selected instance.

    Templates can use ``{{ instance }}`` or ``{{ instance.key }}``.  Apps
    that want richer objects pass their own factory as
    ``TotoConfig.model_class``; it is called with the key string.
    """

    key: str

    def __str__(self) -> str:
        return self.key
