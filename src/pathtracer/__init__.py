"""Monte Carlo path tracer for scenes of spheres.

This package renders spheres with diffuse, metal and glass materials under a
sky gradient, with support for:
- Thin-lens camera with depth of field and jittered anti-aliasing
- Depth-limited path tracing with an explicit, seedable random source
- JSON scene files and built-in scene presets
- A data-parallel Taichi backend with progressive accumulation

Subpackages:
    core: Vectors, rays, intervals, the random source and the integrator
    geometry: Hit records and the sphere primitive
    materials: Lambertian, metal and dielectric scattering models
    scene: Scene container, presets and scene files
    camera: Camera configuration and reference rendering loop
    accel: Taichi kernels and the parallel renderer (import after ti.init)
    preview: PNG export and matplotlib preview
"""

__version__ = "0.1.0"
