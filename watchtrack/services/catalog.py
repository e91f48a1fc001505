import logging

from ..core.errors import AuthorizationError, NotFoundError
from ..models.content import CatalogItem, ContentKind
from ..repositories.accounts import AccountRepository
from ..repositories.catalog import CatalogRepository
from .profiles import load_account, require_object_id

logger = logging.getLogger(__name__)


class CatalogService:
    def __init__(self, catalog: CatalogRepository, accounts: AccountRepository):
        self.catalog = catalog
        self.accounts = accounts

    async def open_title(self, account_id: str, kind: ContentKind, content_id: str) -> CatalogItem:
        """Fetch a published title for viewing and count the view."""
        require_object_id(content_id, "id")
        item = await self.catalog.find_by_id(kind, content_id)
        if not item or not item.is_published:
            raise NotFoundError(kind.value, content_id)

        if item.is_premium:
            account = await load_account(self.accounts, account_id)
            if not account.is_premium:
                raise AuthorizationError("Premium subscription required")

        counted = await self.catalog.increment_views(kind, content_id)
        # Unpublished between the two calls
        if not counted:
            raise NotFoundError(kind.value, content_id)
        return counted

    async def delete_content(self, kind: ContentKind, content_id: str) -> int:
        """
        Delete a title, then pull it out of every profile. The purge is a
        separate best-effort write; a failure there leaves dangling references
        that readers already tolerate.
        """
        require_object_id(content_id, "id")
        if not await self.catalog.delete(kind, content_id):
            raise NotFoundError(kind.value, content_id)

        try:
            purged = await self.accounts.purge_content(content_id)
        except Exception as e:
            logger.error(f"Deleted {kind.value} {content_id} but purging references failed: {str(e)}")
            return 0
        logger.info(f"Deleted {kind.value} {content_id}, purged from {purged} accounts")
        return purged
