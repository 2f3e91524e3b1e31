# Supabase Auth
# This module uses Supabase's built-in authentication system
# No custom tables are required - Supabase Auth handles:
# - User registration (auth.users table)
# - Password, magic link, OTP and OAuth sign-in
# - Session tokens (kept in cookies by supaplate.database.cookie_storage)
# - Email confirmation, recovery and email-change verification

"""
Supabase Auth calls used here:
- auth.sign_up() / auth.resend() - register and re-send the verification email
- auth.sign_in_with_password() - password login
- auth.sign_in_with_otp() / auth.verify_otp() - magic link and one-time codes
- auth.sign_in_with_oauth() / auth.exchange_code_for_session() - social login (PKCE)
- auth.reset_password_for_email() / auth.update_user() - password recovery
- auth.sign_out() - logout

The only direct table access is the duplicate-email check against auth.users
(supaplate.database.postgres.does_user_exist).
"""
