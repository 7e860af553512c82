"""Artifact path taxonomy used for per-resource download counters.

Two shapes are recognised on a canonical path:

* ``/images/<release>/<image...>``: the image name may itself contain
  separators (``/images/30000/live/clear.img.xz``).
* ``/update/<release>/<version>/<file...>``: the version is a run of
  ASCII decimal digits.

Anything else is not a resource and only counts toward the aggregates.
"""

from dataclasses import dataclass
from typing import Optional, Union

_IMAGES = "images"
_UPDATE = "update"
_DIGITS = frozenset("0123456789")


@dataclass(frozen=True)
class ImageResource:
    """An OS image request."""

    release: str
    image: str


@dataclass(frozen=True)
class UpdateResource:
    """An update content request."""

    release: str
    version: str


Resource = Union[ImageResource, UpdateResource]


def _is_version(segment: str) -> bool:
    return bool(segment) and all(char in _DIGITS for char in segment)


def match_resource(path: str) -> Optional[Resource]:
    """Classify a canonical request path.

    Args:
        path: A path already passed through ``canonicalize_path``.

    Returns:
        ``ImageResource``, ``UpdateResource`` or ``None`` when the path
        matches neither shape.
    """
    if not path.startswith("/"):
        return None
    segments = path[1:].split("/")

    if segments[0] == _IMAGES and len(segments) >= 3 and segments[1]:
        image = "/".join(segments[2:])
        if image:
            return ImageResource(release=segments[1], image=image)
        return None

    if (
        segments[0] == _UPDATE
        and len(segments) >= 4
        and segments[1]
        and _is_version(segments[2])
        and segments[3]
    ):
        return UpdateResource(release=segments[1], version=segments[2])

    return None
