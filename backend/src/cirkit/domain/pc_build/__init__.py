"""PC build configurator."""

from cirkit.domain.pc_build.catalog import (
    CATEGORIES,
    CATEGORY_IDS,
    PC_COMPONENTS,
    Category,
    ComponentCatalog,
    PCComponent,
)
from cirkit.domain.pc_build.configurator import (
    CompatibilityIssue,
    PCBuild,
    Severity,
)

__all__ = [
    "CATEGORIES",
    "CATEGORY_IDS",
    "PC_COMPONENTS",
    "Category",
    "CompatibilityIssue",
    "ComponentCatalog",
    "PCBuild",
    "PCComponent",
    "Severity",
]
