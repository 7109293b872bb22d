"""Materials module: the empirical Phong/Whitted surface model.

Components:
    phong: PhongMaterial, the specular term and the material registry
"""

from .phong import (
    MAX_MATERIALS,
    PhongMaterial,
    add_phong_material,
    clear_materials,
    get_material,
    get_material_count,
    specular_term,
)

__all__ = [
    "PhongMaterial",
    "specular_term",
    "add_phong_material",
    "clear_materials",
    "get_material",
    "get_material_count",
    "MAX_MATERIALS",
]
