# Supabase table: payments
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

payments:
- payment_id: bigint (primary key, generated always as identity)
- payment_key: text (not null)
- order_id: text (not null)
- order_name: text (not null)
- total_amount: double precision (not null)
- metadata: jsonb (not null)
- raw_data: jsonb (not null) - the full confirmation response from Toss
- receipt_url: text (not null)
- status: text (not null)
- user_id: uuid (references auth.users.id ON DELETE CASCADE)
- approved_at: timestamp (not null)
- requested_at: timestamp (not null)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

Row-level security: the owner (auth.uid() = user_id) may select their rows.
Rows are inserted with the service-role client after a confirmed payment.
"""
