# Supabase Queues (pgmq): mailer
# Messages are enqueued by database triggers and consumed by the cron route

"""
Queue: mailer (pgmq), read through the pgmq_public schema RPCs.

Message payload:
- to: text - recipient address
- template: text - email template name ('welcome')
- data: jsonb - template data (for 'welcome', the new profile row)

The handle_sign_up trigger enqueues a 'welcome' message after it creates the
profile. An external scheduler calls POST /api/cron/mailer with the
CRON_SECRET in the Authorization header; each call pops at most one message.
"""
