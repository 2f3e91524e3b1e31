from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from typing import Dict
from uuid import UUID

from supaplate.core.dependencies import get_current_user, get_server_client
from supaplate.core.forms import validate_form
from supaplate.database.supabase_client import ServerClient
from supaplate.modules.phraselog.ai_client import GeminiClient
from supaplate.modules.phraselog.schemas import (
    BatchSaveRequest, BatchSaveResponse, MasteredRequest, SavePhraseRequest, SceneRequest
)
from supaplate.modules.phraselog.service import PhraseLogService

router = APIRouter(prefix="/phraselog", tags=["phraselog"])


def get_phraselog_service(server: ServerClient = Depends(get_server_client)) -> PhraseLogService:
    return PhraseLogService(server.client)


def get_ai_client() -> GeminiClient:
    return GeminiClient()


@router.post("/scenes")
async def create_scene(
    request: Request,
    user: Dict = Depends(get_current_user),
    service: PhraseLogService = Depends(get_phraselog_service),
    ai: GeminiClient = Depends(get_ai_client)
):
    """Describe a situation and get coached English expressions for it"""
    form = await request.form()
    scene_data = validate_form(SceneRequest, {
        "intention": form.get("intention", ""),
        "context": form.get("context", ""),
        "to_who": form.get("to_who", ""),
        "nuances": form.getlist("nuances") or None,
    })
    return await service.create_scene(user["id"], scene_data, ai)


@router.post("/phrases")
async def save_phrase(
    phrase: SavePhraseRequest,
    user: Dict = Depends(get_current_user),
    service: PhraseLogService = Depends(get_phraselog_service)
):
    saved = service.save_phrase(phrase)
    return {"success": True, "savedPhrase": saved}


@router.post("/phrases/batch", response_model=BatchSaveResponse)
async def save_phrases(
    batch: BatchSaveRequest,
    user: Dict = Depends(get_current_user),
    service: PhraseLogService = Depends(get_phraselog_service)
):
    """Save several expressions of one scene; 207 when some of them failed"""
    saved, failed = await service.save_batch(batch)
    if failed:
        return JSONResponse(status_code=207, content={"saved": saved, "failed": failed})
    return BatchSaveResponse(saved=saved, failed=failed)


@router.get("/phrases")
async def list_phrases(
    user: Dict = Depends(get_current_user),
    service: PhraseLogService = Depends(get_phraselog_service)
):
    return service.list_saved_phrases(user["id"])


@router.post("/phrases/{phrase_id}/review")
async def review_phrase(
    phrase_id: UUID,
    user: Dict = Depends(get_current_user),
    service: PhraseLogService = Depends(get_phraselog_service)
):
    return service.record_review(user["id"], str(phrase_id))


@router.put("/phrases/{phrase_id}/mastered")
async def set_mastered(
    phrase_id: UUID,
    body: MasteredRequest,
    user: Dict = Depends(get_current_user),
    service: PhraseLogService = Depends(get_phraselog_service)
):
    return service.set_mastered(user["id"], str(phrase_id), body.is_mastered)


@router.get("/progress")
async def list_progress(
    user: Dict = Depends(get_current_user),
    service: PhraseLogService = Depends(get_phraselog_service)
):
    return service.list_progress(user["id"])
