"""
Campaign service - listing, lookup and owner-restricted mutation.

Every read path starts from ``visible_filter()`` so soft-deleted campaigns
never leak into results, whichever query is added later.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

from campaigns.auth.policies import ensure_can_mutate
from campaigns.core.exceptions import NotFoundError, ValidationFailedError
from campaigns.core.models import (
    Campaign,
    CampaignCreate,
    CampaignResponse,
    CampaignStatistics,
    CampaignStatus,
    CampaignUpdate,
    Page,
    Role,
    parse_model,
)
from campaigns.core.utils import utc_now
from campaigns.services.query import (
    CampaignQueryParams,
    build_order,
    build_search,
    clamp_page_number,
    clamp_page_size,
    total_pages,
)
from campaigns.storage import Collections, StorageProvider

logger = logging.getLogger(__name__)


def visible_filter(**filters: Any) -> dict[str, Any]:
    """Base predicate for every campaign read: not soft-deleted."""
    return {**filters, "is_deleted": False}


class CampaignService:
    """Query engine and mutation rules for campaigns."""

    def __init__(self, storage: StorageProvider):
        self.storage = storage

    @property
    def _metadata(self):
        return self.storage.metadata

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def list_campaigns(self, params: CampaignQueryParams | None = None) -> Page[CampaignResponse]:
        """
        Filtered, searched, sorted page of visible campaigns.

        ``total_records`` is counted over the filtered set before paging.
        """
        params = params or CampaignQueryParams()
        page_number = clamp_page_number(params.page_number)
        page_size = clamp_page_size(params.page_size)

        filters: dict[str, Any] = {}
        if params.status is not None:
            try:
                filters["status"] = CampaignStatus.parse(params.status)
            except ValueError as e:
                raise ValidationFailedError(errors=[f"status: {e}"]) from e
        if params.created_by is not None:
            filters["created_by"] = params.created_by
        filters = visible_filter(**filters)
        search = build_search(params.search)

        total_records = await self._metadata.count(Collections.CAMPAIGNS, filters, search)
        docs = await self._metadata.query(
            Collections.CAMPAIGNS,
            filters=filters,
            search=search,
            order_by=build_order(params.sort_by, params.sort_order),
            limit=page_size,
            offset=(page_number - 1) * page_size,
        )

        campaigns = [Campaign(**doc) for doc in docs]
        names = await self._creator_names({c.created_by for c in campaigns})
        items = [CampaignResponse.from_campaign(c, names.get(c.created_by, "")) for c in campaigns]

        logger.info(f"Retrieved {len(items)} campaigns (page {page_number})")
        return Page[CampaignResponse](
            items=items,
            page_number=page_number,
            page_size=page_size,
            total_records=total_records,
            total_pages=total_pages(total_records, page_size),
        )

    async def get_campaign(self, campaign_id: int) -> CampaignResponse:
        """Any authenticated caller may read any visible campaign."""
        campaign = await self._get_visible(campaign_id)
        return await self._to_response(campaign)

    async def statistics(self) -> CampaignStatistics:
        """Aggregate figures over visible campaigns."""
        docs = await self._metadata.query(
            Collections.CAMPAIGNS,
            filters=visible_filter(),
            limit=await self._metadata.count(Collections.CAMPAIGNS, visible_filter()),
        )
        if not docs:
            return CampaignStatistics()

        campaigns = [Campaign(**doc) for doc in docs]
        total_budget = sum((c.budget for c in campaigns), Decimal("0"))
        by_status = {status: 0 for status in CampaignStatus}
        for campaign in campaigns:
            by_status[campaign.status] += 1

        return CampaignStatistics(
            total_campaigns=len(campaigns),
            total_budget=total_budget,
            average_budget=(total_budget / len(campaigns)).quantize(Decimal("0.01")),
            draft_campaigns=by_status[CampaignStatus.DRAFT],
            active_campaigns=by_status[CampaignStatus.ACTIVE],
            paused_campaigns=by_status[CampaignStatus.PAUSED],
            completed_campaigns=by_status[CampaignStatus.COMPLETED],
            cancelled_campaigns=by_status[CampaignStatus.CANCELLED],
        )

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def create_campaign(
        self,
        owner_id: int,
        fields: CampaignCreate | dict[str, Any],
    ) -> CampaignResponse:
        """
        Create a campaign owned by ``owner_id``.

        Raises:
            ValidationFailedError: fields violate the campaign rules
        """
        data = parse_model(CampaignCreate, fields)
        doc = await self._metadata.insert(
            Collections.CAMPAIGNS,
            {
                **data.model_dump(),
                "created_by": owner_id,
                "created_at": utc_now(),
                "updated_at": None,
                "is_deleted": False,
            },
        )
        campaign = Campaign(**doc)
        logger.info(f"Campaign {campaign.id} created by account {owner_id}")
        return await self._to_response(campaign)

    async def update_campaign(
        self,
        campaign_id: int,
        requester_id: int,
        requester_role: Role,
        updates: CampaignUpdate | dict[str, Any],
    ) -> CampaignResponse:
        """
        Apply a partial update.

        Order: validate input, resolve the campaign (NotFound), authorize
        (Forbidden), check end > start on the merged result, then write.
        """
        data = parse_model(CampaignUpdate, updates)
        campaign = await self._get_visible(campaign_id)
        ensure_can_mutate(requester_id, requester_role, campaign.created_by, action="update")

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        merged = campaign.model_copy(update=changes)
        if merged.end_date <= merged.start_date:
            raise ValidationFailedError(errors=["end_date: End date must be after start date"])

        changes["updated_at"] = utc_now()
        await self._write(campaign_id, changes)

        logger.info(f"Campaign {campaign_id} updated by account {requester_id}")
        return await self._to_response(merged.model_copy(update={"updated_at": changes["updated_at"]}))

    async def soft_delete_campaign(
        self,
        campaign_id: int,
        requester_id: int,
        requester_role: Role,
    ) -> None:
        """Mark a campaign deleted. The record stays in the store."""
        campaign = await self._get_visible(campaign_id)
        ensure_can_mutate(requester_id, requester_role, campaign.created_by, action="delete")

        await self._write(campaign_id, {"is_deleted": True, "updated_at": utc_now()})
        logger.info(f"Campaign {campaign_id} deleted by account {requester_id}")

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    async def _get_visible(self, campaign_id: int) -> Campaign:
        doc = await self._metadata.find_one(Collections.CAMPAIGNS, visible_filter(id=campaign_id))
        if doc is None:
            raise NotFoundError(f"Campaign with ID {campaign_id} does not exist")
        return Campaign(**doc)

    async def _write(self, campaign_id: int, changes: dict[str, Any]) -> None:
        if not await self._metadata.update(Collections.CAMPAIGNS, campaign_id, changes):
            # Existed a moment ago; storage must have lost it.
            raise RuntimeError(f"Campaign {campaign_id} vanished during update")

    async def _to_response(self, campaign: Campaign) -> CampaignResponse:
        names = await self._creator_names({campaign.created_by})
        return CampaignResponse.from_campaign(campaign, names.get(campaign.created_by, ""))

    async def _creator_names(self, account_ids: set[int]) -> dict[int, str]:
        names = {}
        for account_id in account_ids:
            doc = await self._metadata.get(Collections.ACCOUNTS, account_id)
            if doc:
                names[account_id] = doc.get("full_name", "")
        return names
