import asyncio
import logging
from datetime import datetime, timezone
from supabase import Client, PostgrestAPIError
from fastapi import HTTPException
from typing import Any, Dict, List, Optional, Tuple

from supaplate.modules.phraselog.ai_client import GeminiClient, PhraseGenerationError
from supaplate.modules.phraselog.prompt import PROMPT_VERSION, build_coaching_prompt
from supaplate.modules.phraselog.schemas import (
    BatchSaveRequest, Expression, SavePhraseRequest, SceneRequest
)

logger = logging.getLogger(__name__)

MASTERY_REVIEWS = 5


class PhraseLogService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    async def create_scene(self, user_id: str, scene: SceneRequest, ai: GeminiClient) -> Dict[str, Any]:
        """Generate coached expressions for a scene and store the scene"""
        prompt = build_coaching_prompt(scene.to_who, scene.intention, scene.context, scene.nuances)
        try:
            ai_response = await ai.generate_json(prompt)
            result = self.supabase.table("scenes")\
                .insert({
                    "user_id": user_id,
                    "my_intention": scene.intention,
                    "to_who": scene.to_who,
                    "the_context": scene.context,
                    "desired_nuance": ",".join(scene.nuances) if scene.nuances else None,
                    "ai_request_prompt_version": PROMPT_VERSION,
                })\
                .execute()
            if not result.data:
                raise PhraseGenerationError("Scene creation failed")
        except (PhraseGenerationError, PostgrestAPIError) as e:
            logger.error(f"Error creating scene for {user_id}: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to generate or save phrase")

        return {"aiResponse": ai_response, "sceneId": result.data[0]["id"]}

    def _insert_phrase(self, scene_id: str, expression: Expression) -> Dict[str, Any]:
        result = self.supabase.table("phrases")\
            .insert({
                "scene_id": scene_id,
                "english_phrase": expression.expression,
                "explanation": expression.coaching.explanation,
                "is_saved_by_user": True,
                "ai_response_raw": expression.model_dump_json(include={"expression", "coaching", "example"}),
            })\
            .execute()
        return result.data[0]

    def save_phrase(self, phrase: SavePhraseRequest) -> Dict[str, Any]:
        try:
            return self._insert_phrase(str(phrase.scene_id), phrase)
        except (PostgrestAPIError, IndexError) as e:
            logger.error(f"Error saving phrase for scene {phrase.scene_id}: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to save phrase")

    async def save_batch(self, batch: BatchSaveRequest) -> Tuple[int, int]:
        """Save every expression concurrently; returns (saved, failed), no rollback"""
        scene_id = str(batch.scene_id)
        results = await asyncio.gather(
            *[asyncio.to_thread(self._insert_phrase, scene_id, e) for e in batch.expressions],
            return_exceptions=True,
        )
        failed = [r for r in results if isinstance(r, Exception)]
        for error in failed:
            logger.error(f"Error saving phrase for scene {scene_id}: {str(error)}")
        return len(results) - len(failed), len(failed)

    def list_saved_phrases(self, user_id: str) -> List[Dict[str, Any]]:
        """Saved phrases with their scene, newest first"""
        result = self.supabase.table("phrases")\
            .select("*, scenes!inner(*)")\
            .eq("scenes.user_id", user_id)\
            .eq("is_saved_by_user", True)\
            .order("created_at", desc=True)\
            .execute()
        return result.data

    def _get_progress(self, user_id: str, phrase_id: str) -> Optional[Dict[str, Any]]:
        result = self.supabase.table("learning_progress")\
            .select("*")\
            .eq("user_id", user_id)\
            .eq("phrase_id", phrase_id)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def _save_progress(
        self,
        user_id: str,
        phrase_id: str,
        existing: Optional[Dict[str, Any]],
        values: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Update the progress row, creating it on first use"""
        values = {**values, "updated_at": datetime.now(timezone.utc).isoformat()}
        try:
            if existing is None:
                result = self.supabase.table("learning_progress")\
                    .insert({"user_id": user_id, "phrase_id": phrase_id, **values})\
                    .execute()
            else:
                result = self.supabase.table("learning_progress")\
                    .update(values)\
                    .eq("id", existing["id"])\
                    .execute()
        except PostgrestAPIError as e:
            logger.error(f"Error updating progress for phrase {phrase_id}: {e.message}")
            raise HTTPException(status_code=500, detail=e.message)
        return result.data[0]

    def record_review(self, user_id: str, phrase_id: str) -> Dict[str, Any]:
        existing = self._get_progress(user_id, phrase_id)
        review_count = (existing or {}).get("review_count", 0) + 1
        return self._save_progress(user_id, phrase_id, existing, {
            "review_count": review_count,
            "last_reviewed_at": datetime.now(timezone.utc).isoformat(),
            "is_mastered": (existing or {}).get("is_mastered", False) or review_count >= MASTERY_REVIEWS,
        })

    def set_mastered(self, user_id: str, phrase_id: str, is_mastered: bool) -> Dict[str, Any]:
        existing = self._get_progress(user_id, phrase_id)
        return self._save_progress(user_id, phrase_id, existing, {"is_mastered": is_mastered})

    def list_progress(self, user_id: str) -> List[Dict[str, Any]]:
        result = self.supabase.table("learning_progress")\
            .select("*")\
            .eq("user_id", user_id)\
            .order("updated_at", desc=True)\
            .execute()
        return result.data
