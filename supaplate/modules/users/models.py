# Supabase table: profiles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

profiles:
- profile_id: uuid (primary key, references auth.users.id ON DELETE CASCADE)
- name: text (not null)
- avatar_url: text (nullable)
- marketing_consent: boolean (not null, default false)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now(), maintained by the set_updated_at trigger)

Row-level security: the authenticated owner (auth.uid() = profile_id) may
select, update and delete their row.

A trigger on auth.users creates the profile at sign-up: email/phone users get
the `name` and `marketing_consent` from their metadata (or 'Anonymous' and
true), OAuth users get the provider's full_name and avatar_url.

Storage bucket: avatars (object key = user id).
"""
