from fastapi import APIRouter
from fastapi.responses import PlainTextResponse, Response

from supaplate.modules.site.service import build_robots, build_sitemap

router = APIRouter(tags=["site"])


@router.get("/robots.txt", response_class=PlainTextResponse)
async def robots():
    return build_robots()


@router.get("/sitemap.xml")
async def sitemap():
    """Public pages plus every blog and legal document"""
    return Response(content=build_sitemap(), media_type="application/xml")
