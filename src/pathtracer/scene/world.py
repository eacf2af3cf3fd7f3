"""Scene container and nearest-hit query.

A Scene is an ordered collection of hittables built once before rendering
and read-only while a render is running. Its hit() answers the closest
intersection over all members in a single pass: each member is queried with
the lower bound unchanged and the upper bound tightened to the nearest hit
found so far.

Example:
    >>> from pathtracer.core.vector import Vector3
    >>> from pathtracer.geometry import Sphere
    >>> from pathtracer.materials import Lambertian
    >>> from pathtracer.scene.world import Scene
    >>> gray = Lambertian(Vector3(0.5, 0.5, 0.5))
    >>> scene = Scene()
    >>> scene.add(Sphere(Vector3(0.0, 0.0, -1.0), 0.5, gray))
    >>> scene.add(Sphere(Vector3(0.0, -100.5, -1.0), 100.0, gray))
    >>> len(scene)
    2
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

from pathtracer.core.interval import Interval
from pathtracer.core.ray import Ray
from pathtracer.geometry.hittable import HitRecord, Hittable

if TYPE_CHECKING:
    from pathtracer.materials import Material


class Scene:
    """An ordered list of hittable objects that is itself hittable."""

    def __init__(self, objects: Iterable[Hittable] | None = None) -> None:
        self._objects: list[Hittable] = list(objects) if objects is not None else []

    def add(self, obj: Hittable) -> None:
        """Append an object to the scene."""
        self._objects.append(obj)

    def extend(self, objects: Iterable[Hittable]) -> None:
        """Append several objects, preserving their order."""
        self._objects.extend(objects)

    def clear(self) -> None:
        """Remove all objects."""
        self._objects.clear()

    @property
    def objects(self) -> tuple[Hittable, ...]:
        """Read-only view of the members in insertion order."""
        return tuple(self._objects)

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[Hittable]:
        return iter(self._objects)

    def hit(self, ray: Ray, ray_t: Interval) -> HitRecord | None:
        """Find the nearest intersection over all members.

        Args:
            ray: The ray to test.
            ray_t: Valid hit distances (strict bounds).

        Returns:
            The HitRecord with the smallest t inside ray_t, or None.
        """
        closest: HitRecord | None = None
        for obj in self._objects:
            query = ray_t if closest is None else ray_t.with_max(closest.t)
            rec = obj.hit(ray, query)
            if rec is not None:
                closest = rec
        return closest

    def materials(self) -> list[Material]:
        """Distinct materials of the members in first-use order.

        Materials are compared by value, so two spheres built with equal
        parameters share one entry.
        """
        seen: list[Material] = []
        for obj in self._objects:
            material = getattr(obj, "material", None)
            if material is not None and material not in seen:
                seen.append(material)
        return seen

    def __repr__(self) -> str:
        return f"Scene({len(self._objects)} objects)"
