"""Ready-made demo scenes.

Each factory clears the scene fields, builds a SceneManager, and returns it
together with a Camera configured for that scene.

Scenes:
    two-spheres: a small diffuse sphere resting on a huge diffuse "ground"
        sphere, rendered at 100 samples and 50 bounces.
    showcase: one sphere of each material over a diffuse ground, including a
        hollow glass sphere (an inner sphere with the inverse index).

Example:
    >>> from src.raytracer.scene.demo import create_two_sphere_scene
    >>> scene, camera = create_two_sphere_scene()
    >>> text = camera.render_to_string(scene)
"""

from src.raytracer.camera.camera import Camera
from src.raytracer.scene.manager import SceneManager

# =============================================================================
# Two-Sphere Scene
# =============================================================================

GROUND_CENTER = (0.0, -100.5, -1.0)
GROUND_RADIUS = 100.0
CENTER_SPHERE_CENTER = (0.0, 0.0, -1.0)
CENTER_SPHERE_RADIUS = 0.5

GROUND_ALBEDO = (0.8, 0.8, 0.0)
CENTER_ALBEDO = (0.1, 0.2, 0.5)

# =============================================================================
# Material Showcase Scene
# =============================================================================

GLASS_REFRACTION_INDEX = 1.5
METAL_ALBEDO = (0.8, 0.6, 0.2)
METAL_FUZZ = 1.0
LEFT_SPHERE_CENTER = (-1.0, 0.0, -1.0)
RIGHT_SPHERE_CENTER = (1.0, 0.0, -1.0)
BUBBLE_RADIUS = 0.4


def create_two_sphere_scene(
    samples_per_pixel: int = 100,
    max_depth: int = 50,
    image_width: int = 400,
) -> tuple[SceneManager, Camera]:
    """Create the two-sphere scene.

    A sphere of radius 0.5 at (0, 0, -1) sits on a sphere of radius 100 at
    (0, -100.5, -1). Both are Lambertian. The camera uses the default
    orientation (at the origin, looking down -z, 90 degree vertical field
    of view, 16:9).

    Args:
        samples_per_pixel: Samples per pixel. Default 100.
        max_depth: Maximum bounces per sample. Default 50.
        image_width: Image width in pixels. Default 400 (400x225 image).

    Returns:
        Tuple of (SceneManager, Camera).
    """
    scene = SceneManager()

    center = scene.add_lambertian_material(CENTER_ALBEDO)
    ground = scene.add_lambertian_material(GROUND_ALBEDO)

    scene.add_sphere(CENTER_SPHERE_CENTER, CENTER_SPHERE_RADIUS, center)
    scene.add_sphere(GROUND_CENTER, GROUND_RADIUS, ground)

    camera = Camera(
        image_width=image_width,
        samples_per_pixel=samples_per_pixel,
        max_depth=max_depth,
    )
    return scene, camera


def create_material_showcase_scene(
    samples_per_pixel: int = 100,
    max_depth: int = 50,
    image_width: int = 400,
) -> tuple[SceneManager, Camera]:
    """Create a scene with one sphere per material variant.

    Layout, left to right at z = -1:
        - Hollow glass sphere: an outer dielectric sphere (index 1.5) and an
          inner air bubble (index 1/1.5) sharing its center.
        - Diffuse blue sphere.
        - Fuzzy gold metal sphere.
    All three rest on the diffuse ground sphere.

    Returns:
        Tuple of (SceneManager, Camera).
    """
    scene = SceneManager()

    ground = scene.add_lambertian_material(GROUND_ALBEDO)
    diffuse = scene.add_lambertian_material(CENTER_ALBEDO)
    glass = scene.add_dielectric_material(GLASS_REFRACTION_INDEX)
    bubble = scene.add_dielectric_material(1.0 / GLASS_REFRACTION_INDEX)
    gold = scene.add_metal_material(METAL_ALBEDO, fuzz=METAL_FUZZ)

    scene.add_sphere(GROUND_CENTER, GROUND_RADIUS, ground)
    scene.add_sphere(CENTER_SPHERE_CENTER, CENTER_SPHERE_RADIUS, diffuse)
    scene.add_sphere(LEFT_SPHERE_CENTER, CENTER_SPHERE_RADIUS, glass)
    scene.add_sphere(LEFT_SPHERE_CENTER, BUBBLE_RADIUS, bubble)
    scene.add_sphere(RIGHT_SPHERE_CENTER, CENTER_SPHERE_RADIUS, gold)

    camera = Camera(
        image_width=image_width,
        samples_per_pixel=samples_per_pixel,
        max_depth=max_depth,
    )
    return scene, camera
