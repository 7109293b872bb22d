"""Phong material model and material registry.

A Phong material describes how a surface responds to the Whitted shading
equation:

    color * diffuse * diffuse_const
    + white * specular * specular_const
    + color * ambient_const
    + reflected * reflectance

where diffuse and specular are the light sums gathered at the hit point and
reflected is the color traced along the mirror direction. Simpler material
variants are expressed by setting the unused constants to 0 or 1.

Materials are stored in Taichi fields indexed by material id so that kernels
can look them up while shading. Entries never change after registration.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.materials.phong import add_phong_material
    >>> red = add_phong_material(color=(1.0, 0.2, 0.2), phong_exp=50.0)
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.dataclass
class PhongMaterial:
    """Phong material properties.

    Attributes:
        color: Surface color (RGB). Channels are nominally in [0, 1] but are
            not clamped.
        phong_exp: Sharpness exponent of the specular highlight (>= 0).
        diffuse_const: Weight of the diffuse term.
        ambient_const: Weight of the ambient term.
        specular_const: Weight of the specular term.
        reflectance: Weight of the mirror-reflected color.
    """

    color: vec3
    phong_exp: ti.f32
    diffuse_const: ti.f32
    ambient_const: ti.f32
    specular_const: ti.f32
    reflectance: ti.f32


@ti.func
def specular_term(alignment: ti.f32, phong_exp: ti.f32) -> ti.f32:
    """Evaluate the Phong highlight for one light.

    ``alignment`` is dot(reflect(light_dir, normal), view_dir) where the view
    direction points from the camera toward the surface, so the highlight
    lives on the negative branch, min(0, alignment). A negative base raised
    to a non-integer exponent has no real value, so non-integer exponents
    contribute nothing. For integer exponents the magnitude of the branch is
    raised to the exponent, which keeps odd exponents from subtracting light.
    A zero base contributes nothing, including the 0^0 case.

    Args:
        alignment: Dot product of the reflected light direction and the ray
            direction.
        phong_exp: Sharpness exponent.

    Returns:
        The specular weight, >= 0.
    """
    base = -ti.min(0.0, alignment)
    result = 0.0
    if base > 0.0 and phong_exp == ti.floor(phong_exp):
        result = base**phong_exp
    return result


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of materials in the scene
MAX_MATERIALS = 256

# Storage for Phong material properties (Structure of Arrays)
material_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_phong_exps = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
material_diffuse_consts = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
material_ambient_consts = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
material_specular_consts = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
material_reflectances = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_materials() -> None:
    """Clear all materials.

    Resets the material count to zero. Existing data in the fields will be
    overwritten when new materials are added.
    """
    num_materials[None] = 0


def _check_unit_interval(name: str, value: float) -> None:
    if value < 0.0 or value > 1.0:
        raise ValueError(f"{name} = {value} is outside [0, 1]")


def validate_phong_params(
    color: tuple[float, float, float],
    phong_exp: float,
    diffuse_const: float,
    ambient_const: float,
    specular_const: float,
    reflectance: float,
) -> None:
    """Check Phong material parameters without registering them.

    Raises:
        ValueError: If the color does not have 3 non-negative components, or
            any other parameter is out of range.
    """
    if len(color) != 3:
        raise ValueError(f"color must have 3 components, got {len(color)}")
    for i, component in enumerate(color):
        if component < 0.0:
            raise ValueError(f"Color component {i} = {component} is negative")
    if phong_exp < 0.0:
        raise ValueError(f"phong_exp = {phong_exp} must be non-negative")
    _check_unit_interval("diffuse_const", diffuse_const)
    _check_unit_interval("ambient_const", ambient_const)
    _check_unit_interval("specular_const", specular_const)
    _check_unit_interval("reflectance", reflectance)


def add_phong_material(
    color: tuple[float, float, float],
    phong_exp: float = 50.0,
    diffuse_const: float = 1.0,
    ambient_const: float = 0.0,
    specular_const: float = 1.0,
    reflectance: float = 0.0,
) -> int:
    """Add a Phong material to the material registry.

    Args:
        color: Surface color as (R, G, B). Exactly 3 non-negative components.
        phong_exp: Specular exponent, must be >= 0.
        diffuse_const: Diffuse weight in [0, 1].
        ambient_const: Ambient weight in [0, 1].
        specular_const: Specular weight in [0, 1].
        reflectance: Mirror reflection weight in [0, 1].

    Returns:
        The material id of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If any parameter is out of range.
    """
    validate_phong_params(
        color, phong_exp, diffuse_const, ambient_const, specular_const, reflectance
    )

    idx = num_materials[None]
    if idx >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    material_colors[idx] = vec3(color[0], color[1], color[2])
    material_phong_exps[idx] = phong_exp
    material_diffuse_consts[idx] = diffuse_const
    material_ambient_consts[idx] = ambient_const
    material_specular_consts[idx] = specular_const
    material_reflectances[idx] = reflectance
    num_materials[None] = idx + 1
    return idx


def get_material_count() -> int:
    """Get the number of materials in the registry."""
    return int(num_materials[None])


@ti.func
def get_material(material_id: ti.i32) -> PhongMaterial:
    """Look up a material by id.

    Args:
        material_id: The index of the material in the registry.

    Returns:
        The PhongMaterial stored at that index.
    """
    return PhongMaterial(
        color=material_colors[material_id],
        phong_exp=material_phong_exps[material_id],
        diffuse_const=material_diffuse_consts[material_id],
        ambient_const=material_ambient_consts[material_id],
        specular_const=material_specular_consts[material_id],
        reflectance=material_reflectances[material_id],
    )
