from fastapi import APIRouter, Depends

from ..core.auth import CurrentAccount, require_admin
from ..dependencies import get_catalog_service
from ..models.content import ContentKind
from ..services.catalog import CatalogService
from . import success

router = APIRouter(prefix="/admin", tags=["admin"])


@router.delete("/content/{content_type}/{content_id}")
async def delete_content(
    content_type: ContentKind,
    content_id: str,
    admin: CurrentAccount = Depends(require_admin),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Delete a title and purge it from every profile's history and my list."""
    purged = await catalog.delete_content(content_type, content_id)
    return success({"contentId": content_id, "purgedAccounts": purged}, message=f"{content_type.value} deleted")
