"""PC build configurator API routes."""

from fastapi import APIRouter
from pydantic import BaseModel, Field

from cirkit.domain.pc_build import CATEGORIES, ComponentCatalog, PCBuild, PCComponent

router = APIRouter(prefix="/pc-build", tags=["PC Build"])

catalog = ComponentCatalog()


# ----- Schemas -----


class CategoryResponse(BaseModel):
    id: str
    name: str


class ComponentResponse(BaseModel):
    id: str
    category: str
    name: str
    brand: str
    price: int
    specs: list[str]
    store_url: str
    recommended: bool

    @classmethod
    def from_component(cls, component: PCComponent) -> "ComponentResponse":
        return cls(
            id=component.id,
            category=component.category,
            name=component.name,
            brand=component.brand,
            price=component.price,
            specs=list(component.specs),
            store_url=component.store_url,
            recommended=component.recommended,
        )


class CatalogResponse(BaseModel):
    categories: list[CategoryResponse]
    components: list[ComponentResponse]


class BuildCheckRequest(BaseModel):
    """Either a list of component ids or a share code (the code wins)."""

    component_ids: list[str] = Field(default_factory=list, max_length=32)
    share_code: str | None = Field(default=None, max_length=2048)


class IssueResponse(BaseModel):
    severity: str
    message: str
    components: list[str]


class BuildCheckResponse(BaseModel):
    components: list[ComponentResponse]
    total_price: int
    selected_count: int
    complete: bool
    issues: list[IssueResponse]
    share_code: str


# ----- Endpoints -----


@router.get("/components", response_model=CatalogResponse)
async def list_components() -> CatalogResponse:
    """All categories and components."""
    return CatalogResponse(
        categories=[CategoryResponse(id=c.id, name=c.name) for c in CATEGORIES],
        components=[ComponentResponse.from_component(c) for c in catalog.components],
    )


@router.post("/check", response_model=BuildCheckResponse)
async def check_build(request: BuildCheckRequest) -> BuildCheckResponse:
    """Price a build and report compatibility issues."""
    if request.share_code:
        build = PCBuild.from_share_code(request.share_code, catalog)
    else:
        build = PCBuild.from_ids(request.component_ids, catalog)

    return BuildCheckResponse(
        components=[ComponentResponse.from_component(c) for c in build.selected.values()],
        total_price=build.total_price,
        selected_count=build.selected_count,
        complete=build.is_complete,
        issues=[IssueResponse(**issue.to_dict()) for issue in build.check_compatibility()],
        share_code=build.encode_share_code(),
    )
