"""
Campaign endpoints. All of them require authentication.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from campaigns.api.dependencies import get_campaign_service, require_auth
from campaigns.api.responses import ApiResponse, ok
from campaigns.auth.context import AuthContext
from campaigns.core.models import (
    CampaignCreate,
    CampaignResponse,
    CampaignStatistics,
    CampaignUpdate,
    Page,
)
from campaigns.services.campaigns import CampaignService
from campaigns.services.query import DEFAULT_PAGE_SIZE, CampaignQueryParams

router = APIRouter(prefix="/api/campaigns", tags=["campaigns"])


@router.get("", response_model=ApiResponse[Page[CampaignResponse]])
async def list_campaigns(
    page_number: int = Query(1),
    page_size: int = Query(DEFAULT_PAGE_SIZE),
    status: str | None = None,
    search: str | None = None,
    sort_by: str | None = "created",
    sort_order: str | None = "desc",
    created_by: int | None = None,
    ctx: AuthContext = Depends(require_auth),
    campaigns: CampaignService = Depends(get_campaign_service),
):
    """
    List visible campaigns.

    Paging is clamped (page >= 1, size 1-100); unknown sort fields fall back
    to creation time.
    """
    page = await campaigns.list_campaigns(
        CampaignQueryParams(
            status=status,
            search=search,
            sort_by=sort_by,
            sort_order=sort_order,
            page_number=page_number,
            page_size=page_size,
            created_by=created_by,
        )
    )
    return ok(page, "Campaigns retrieved successfully")


@router.get("/stats", response_model=ApiResponse[CampaignStatistics])
async def campaign_statistics(
    ctx: AuthContext = Depends(require_auth),
    campaigns: CampaignService = Depends(get_campaign_service),
):
    return ok(await campaigns.statistics(), "Statistics retrieved successfully")


@router.get("/{campaign_id}", response_model=ApiResponse[CampaignResponse])
async def get_campaign(
    campaign_id: int,
    ctx: AuthContext = Depends(require_auth),
    campaigns: CampaignService = Depends(get_campaign_service),
):
    return ok(await campaigns.get_campaign(campaign_id), "Campaign retrieved successfully")


@router.post("", response_model=ApiResponse[CampaignResponse], status_code=201)
async def create_campaign(
    data: CampaignCreate,
    ctx: AuthContext = Depends(require_auth),
    campaigns: CampaignService = Depends(get_campaign_service),
):
    """Create a campaign owned by the caller."""
    campaign = await campaigns.create_campaign(ctx.account_id, data)
    return ok(campaign, "Campaign created successfully")


@router.put("/{campaign_id}", response_model=ApiResponse[CampaignResponse])
async def update_campaign(
    campaign_id: int,
    data: CampaignUpdate,
    ctx: AuthContext = Depends(require_auth),
    campaigns: CampaignService = Depends(get_campaign_service),
):
    """Partial update. Only the owner or an Admin may update."""
    campaign = await campaigns.update_campaign(campaign_id, ctx.account_id, ctx.role, data)
    return ok(campaign, "Campaign updated successfully")


@router.delete("/{campaign_id}", response_model=ApiResponse[None])
async def delete_campaign(
    campaign_id: int,
    ctx: AuthContext = Depends(require_auth),
    campaigns: CampaignService = Depends(get_campaign_service),
):
    """Soft delete. Only the owner or an Admin may delete."""
    await campaigns.soft_delete_campaign(campaign_id, ctx.account_id, ctx.role)
    return ok(message="Campaign deleted successfully")
