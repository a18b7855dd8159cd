"""Progressive Taichi path tracer for sphere scenes.

This package renders a continuously refining image of a scene made of
spheres: one ray per pixel per frame is bounced through the scene and the
results are averaged into an accumulation buffer.

Subpackages:
    core: Ray types, bounce integrator, frame dispatcher (Renderer)
    geometry: Sphere primitive and ray-sphere intersection
    scene: Scene/material model, intersection engine, preset scenes
    camera: Camera protocol and pinhole camera with precomputed rays
    preview: Display surfaces, interactive window and PNG export
"""

__version__ = "0.1.0"
