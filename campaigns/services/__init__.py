"""
Services - the business operations behind the HTTP layer.
"""

from campaigns.services.campaigns import CampaignService, visible_filter
from campaigns.services.query import CampaignQueryParams

__all__ = [
    "CampaignService",
    "CampaignQueryParams",
    "visible_filter",
]
