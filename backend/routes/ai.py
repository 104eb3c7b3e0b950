from typing import Optional
from fastapi import APIRouter, Query
from config import settings
from services.model_router import ModelRoutingTable

router = APIRouter(prefix="/api/ai", tags=["ai"])

@router.get("/model-route")
async def get_model_route(
    content_type: str = Query("general", alias="contentType"),
    browsing: bool = False,
    language: Optional[str] = None,
    fast_mode: bool = Query(False, alias="fastMode"),
):
    """Report which model a generation request would be routed to"""
    table = ModelRoutingTable.from_settings(settings)
    model, matched_by = table.route(content_type, browsing, language, fast_mode)
    return {"model": model, "matchedBy": matched_by}
