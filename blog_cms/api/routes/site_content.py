"""
Site content routes.

Reads are public. Writes need `settings.edit`, which only admins hold in the
default catalog.
"""

from fastapi import APIRouter, Depends, Query

from blog_cms.api.dependencies.services import SiteContents
from blog_cms.core.auth.dependencies import with_auth
from blog_cms.core.auth.interfaces import AccessRule, Principal
from blog_cms.schemas.site_content import (
    SiteContentResponse,
    SiteContentUpdate,
    SiteContentUpdateResponse,
)
from blog_cms.services.site_content import CONTENT_TYPES

router = APIRouter()

CAN_EDIT_SETTINGS = AccessRule.build(required_permissions=["settings.edit"])


@router.get("", response_model=SiteContentResponse)
async def get_site_content(
    site: SiteContents,
    content_type: str | None = Query(None, alias="type"),
):
    """One block when `type` names one, otherwise every block."""
    if content_type in CONTENT_TYPES:
        return SiteContentResponse(data=await site.get(content_type))
    return SiteContentResponse(data=await site.get_all())


@router.post("", response_model=SiteContentUpdateResponse)
async def update_site_content(
    body: SiteContentUpdate,
    site: SiteContents,
    principal: Principal = Depends(with_auth(CAN_EDIT_SETTINGS)),
):
    await site.update(body.type, body.data, updated_by=principal.id)
    return SiteContentUpdateResponse(
        message=f"Site {body.type} content updated successfully",
        data=body.data,
    )
