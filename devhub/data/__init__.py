# __init__.py
from devhub.data.skill_catalog import CatalogSkill, available_skills, load_skill_catalog

__all__ = [
    "CatalogSkill",
    "available_skills",
    "load_skill_catalog",
]
