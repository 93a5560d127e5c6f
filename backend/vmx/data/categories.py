"""The fixed VMX category table.

US-first ASTM UniFormat-inspired elemental buckets. Internal ids are kept
stable for storage compatibility; only the labels are user-facing.
"""

from __future__ import annotations

from vmx.models.benchmark import CategoryDef
from vmx.models.enums import CategoryId

VMX_CATEGORIES: tuple[CategoryDef, ...] = (
    CategoryDef(id=CategoryId.FACILITATING, label="Site Prep & Infrastructure", sort_order=1),
    CategoryDef(id=CategoryId.SUBSTRUCTURE, label="Substructure", sort_order=2),
    CategoryDef(id=CategoryId.SUPERSTRUCTURE, label="Shell", sort_order=3),
    CategoryDef(id=CategoryId.INTERNAL_FINISHES, label="Interiors", sort_order=4),
    CategoryDef(id=CategoryId.FF_E, label="Equipment & Furnishings", sort_order=5),
    CategoryDef(id=CategoryId.SERVICES, label="Services (MEP)", sort_order=6),
    CategoryDef(id=CategoryId.EXTERNAL_WORKS, label="Exterior Improvements", sort_order=7),
)

CATEGORY_LABELS: dict[CategoryId, str] = {c.id: c.label for c in VMX_CATEGORIES}

CATEGORY_COUNT = len(VMX_CATEGORIES)
