"""Taichi sphere raytracer.

This package renders scenes made of spheres with stochastic ray tracing:
every pixel averages several jittered camera rays, each traced through the
scene with material-based scattering until it escapes to the sky, is absorbed,
or runs out of bounces. The result is written as plain-text (P3) PPM.

Subpackages:
    core: Ray and interval records, random source, backend init, integrator
    geometry: Sphere primitive and hit records
    materials: Lambertian, metal, and dielectric scattering
    scene: Sphere storage, nearest-hit queries, and the scene manager
    camera: Camera configuration, viewport geometry, and ray generation
    output: PPM encoding and file output
"""

__version__ = "0.1.0"
