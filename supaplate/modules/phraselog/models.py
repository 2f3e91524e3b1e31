# Supabase tables: scenes, phrases, learning_progress
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

scenes:
- id: uuid (primary key, default gen_random_uuid())
- user_id: uuid (references profiles.profile_id ON DELETE CASCADE)
- to_who: text (not null) - the audience
- my_intention: text (not null)
- the_context: text (not null)
- desired_nuance: text (nullable) - comma separated, e.g. "friendly,polite"
- ai_request_prompt_version: text (nullable) - coaching prompt version used
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

phrases:
- id: uuid (primary key)
- scene_id: uuid (references scenes.id ON DELETE CASCADE)
- english_phrase: text (not null)
- explanation: text (not null) - Korean coaching explanation
- is_saved_by_user: boolean (not null, default false)
- ai_response_raw: text (nullable) - JSON of the saved expression
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

learning_progress:
- id: uuid (primary key)
- user_id: uuid (references profiles.profile_id ON DELETE CASCADE)
- phrase_id: uuid (references phrases.id ON DELETE CASCADE)
- review_count: integer (not null, default 0)
- last_reviewed_at: timestamp (nullable)
- is_mastered: boolean (not null, default false)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

Row-level security restricts every table to the owning user.
"""
