"""Whitted-style ray tracer for spheres and point lights, built on Taichi.

This package renders a still image of a sphere scene lit by point lights using
the classic recursive illumination model:
- Ambient, shadow-tested diffuse and Phong specular terms
- Mirror reflection traced to a fixed recursion depth
- Sky gradient background for rays that escape

Subpackages:
    core: Vector algebra, shading and the frame renderer
    geometry: Sphere primitive and ray-sphere intersection
    materials: Phong material model and registry
    scene: Scene storage, nearest-hit resolution and scene building
    camera: Pinhole camera ray generation
    preview: Image export and Matplotlib preview
"""

__version__ = "0.1.0"
