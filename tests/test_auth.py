"""
Tests for the authentication routes.

Covers registration, password login, emailed token confirmation, one-time
codes and the OAuth callback.
"""
import json
from unittest.mock import patch

import httpx
from supabase import AuthError, ClientOptions, create_client

from supaplate.config import settings
from supaplate.core.dependencies import get_server_client
from supaplate.database.cookie_storage import CookieStorage
from supaplate.database.supabase_client import ServerClient
from supaplate.main import app
from supaplate.modules.auth.service import ACCOUNT_EXISTS

JOIN_FORM = {
    "name": "Jane",
    "email": "jane@example.com",
    "password": "supersecret",
    "confirmPassword": "supersecret",
    "terms": "true",
}


def write_session(server):
    """Side effect standing in for the SDK persisting a session."""
    def _write(*args, **kwargs):
        server.cookies.set_item("sb-test-project-auth-token", '{"access_token": "abc"}')
    return _write


def sdk_server(handler):
    """Server client backed by the real SDK, talking to an httpx.MockTransport."""
    storage = CookieStorage({})
    supabase = create_client(
        settings.supabase_url,
        settings.supabase_anon_key,
        options=ClientOptions(
            storage=storage,
            flow_type="pkce",
            auto_refresh_token=False,
            persist_session=True,
            httpx_client=httpx.Client(transport=httpx.MockTransport(handler)),
        ),
    )
    return ServerClient(supabase, storage)


class TestJoin:
    def test_duplicate_email_is_rejected_without_sign_up(self, client, supabase_client):
        with patch("supaplate.modules.auth.service.does_user_exist", return_value=True):
            response = client.post("/auth/join", data=JOIN_FORM)

        assert response.status_code == 400
        assert response.json()["detail"] == ACCOUNT_EXISTS
        supabase_client.auth.sign_up.assert_not_called()

    def test_sign_up_with_metadata(self, client, supabase_client):
        with patch("supaplate.modules.auth.service.does_user_exist", return_value=False):
            response = client.post("/auth/join", data={**JOIN_FORM, "marketing": "true"})

        assert response.status_code == 200
        assert response.json() == {"success": True}
        credentials = supabase_client.auth.sign_up.call_args.args[0]
        assert credentials["email"] == "jane@example.com"
        assert credentials["options"]["data"] == {
            "name": "Jane",
            "display_name": "Jane",
            "marketing_consent": True,
        }

    def test_password_mismatch_reports_field_error(self, client, supabase_client):
        response = client.post("/auth/join", data={**JOIN_FORM, "confirmPassword": "different1"})

        assert response.status_code == 400
        assert response.json()["fieldErrors"]["confirmPassword"] == ["Passwords must match"]
        supabase_client.auth.sign_up.assert_not_called()

    def test_terms_must_be_accepted(self, client):
        form = {k: v for k, v in JOIN_FORM.items() if k != "terms"}
        response = client.post("/auth/join", data=form)

        assert response.status_code == 400
        assert response.json()["detail"] == "You must agree to the terms of service"

    def test_provider_error_is_passed_through(self, client, supabase_client):
        supabase_client.auth.sign_up.side_effect = AuthError("Signups not allowed for this instance", None)
        with patch("supaplate.modules.auth.service.does_user_exist", return_value=False):
            response = client.post("/auth/join", data=JOIN_FORM)

        assert response.status_code == 400
        assert response.json()["detail"] == "Signups not allowed for this instance"


class TestLogin:
    def test_success_redirects_home_with_session_cookie(self, client, server, supabase_client):
        supabase_client.auth.sign_in_with_password.side_effect = write_session(server)

        response = client.post(
            "/auth/login",
            data={"email": "jane@example.com", "password": "supersecret"},
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/"
        assert "sb-test-project-auth-token=base64-" in response.headers["set-cookie"]

    def test_invalid_credentials(self, client, supabase_client):
        supabase_client.auth.sign_in_with_password.side_effect = AuthError("Invalid login credentials", None)

        response = client.post(
            "/auth/login",
            data={"email": "jane@example.com", "password": "wrongpass"},
            follow_redirects=False,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid login credentials"

    def test_short_password_is_a_field_error(self, client):
        response = client.post("/auth/login", data={"email": "jane@example.com", "password": "short"})

        assert response.status_code == 400
        assert "password" in response.json()["fieldErrors"]


class TestLogout:
    def test_signs_out_and_clears_session_cookie(self, client, supabase_client):
        server = ServerClient(supabase_client, CookieStorage({"sb-test-project-auth-token": "base64-e30"}))
        supabase_client.auth.sign_out.side_effect = \
            lambda *args, **kwargs: server.cookies.remove_item("sb-test-project-auth-token")
        app.dependency_overrides[get_server_client] = lambda: server

        response = client.get("/auth/logout", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/"
        supabase_client.auth.sign_out.assert_called_once()
        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith("sb-test-project-auth-token=")
        assert "Max-Age=0" in set_cookie


class TestResend:
    def test_verification_link_points_at_verify_page(self, client, supabase_client):
        response = client.post("/auth/api/resend", data={"email": "jane@example.com"})

        assert response.status_code == 200
        assert response.json() == {"success": True}
        supabase_client.auth.resend.assert_called_once_with({
            "type": "signup",
            "email": "jane@example.com",
            "options": {"email_redirect_to": "http://localhost:5173/auth/verify"},
        })

    def test_invalid_email(self, client, supabase_client):
        response = client.post("/auth/api/resend", data={"email": "nope"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid email address"
        supabase_client.auth.resend.assert_not_called()


class TestPasswordReset:
    def test_reset_without_session_goes_back_to_request_page(self, anonymous_client, supabase_client):
        response = anonymous_client.post(
            "/auth/forgot-password/reset",
            data={"password": "newsecret1", "confirmPassword": "newsecret1"},
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/auth/forgot-password"
        supabase_client.auth.update_user.assert_not_called()

    def test_reset_updates_password(self, client, supabase_client):
        response = client.post(
            "/auth/forgot-password/reset",
            data={"password": "newsecret1", "confirmPassword": "newsecret1"},
        )

        assert response.status_code == 200
        supabase_client.auth.update_user.assert_called_once_with({"password": "newsecret1"})


class TestConfirm:
    def test_replayed_recovery_link_sets_no_session(self, client, supabase_client):
        supabase_client.auth.verify_otp.side_effect = AuthError("Email link is invalid or has expired", None)

        response = client.get(
            "/auth/confirm",
            params={"token_hash": "used-hash", "type": "recovery", "next": "/auth/forgot-password/reset"},
            follow_redirects=False,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Email link is invalid or has expired"
        assert "set-cookie" not in response.headers

    def test_email_change_redirect_carries_message(self, client, supabase_client):
        response = client.get(
            "/auth/confirm",
            params={"token_hash": "hash", "type": "email_change", "next": "/account/edit"},
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/account/edit?message=Your%20email%20has%20been%20updated"

    def test_first_email_change_link_redirects_with_provider_message(self, client):
        message = "Confirmation link accepted. Please proceed to confirm link sent to the other email"
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"msg": message, "code": 200})

        app.dependency_overrides[get_server_client] = lambda: sdk_server(handler)
        response = client.get(
            "/auth/confirm",
            params={"token_hash": "h", "type": "email_change", "next": "/account/edit"},
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert response.headers["location"].startswith("/account/edit?message=Confirmation%20link%20accepted")
        assert seen[0].url.path == "/auth/v1/verify"
        assert json.loads(seen[0].content)["token_hash"] == "h"

    def test_invalid_type(self, client):
        response = client.get("/auth/confirm", params={"token_hash": "hash", "type": "magic"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid confirmation code"


class TestOtp:
    def test_magic_link_for_unknown_user(self, client, supabase_client):
        supabase_client.auth.sign_in_with_otp.side_effect = AuthError("Signups not allowed for otp", "otp_disabled")

        response = client.post("/auth/magic-link", data={"email": "nobody@example.com"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Create an account before signing in."

    def test_start_redirects_to_code_entry(self, client, supabase_client):
        response = client.post("/auth/otp/start", data={"email": "jane@example.com"}, follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/auth/otp/complete?email=jane%40example.com"
        options = supabase_client.auth.sign_in_with_otp.call_args.args[0]["options"]
        assert options == {"should_create_user": False}

    def test_code_must_be_six_characters(self, client, supabase_client):
        response = client.post("/auth/otp/complete", data={"email": "jane@example.com", "code": "123"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Could not verify code. Please try again."
        supabase_client.auth.verify_otp.assert_not_called()

    def test_valid_code_signs_in(self, client, server, supabase_client):
        supabase_client.auth.verify_otp.side_effect = write_session(server)

        response = client.post(
            "/auth/otp/complete",
            data={"email": "jane@example.com", "code": "123456"},
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/"
        assert "sb-test-project-auth-token=base64-" in response.headers["set-cookie"]
        supabase_client.auth.verify_otp.assert_called_once_with({
            "email": "jane@example.com",
            "token": "123456",
            "type": "email",
        })


class TestSocial:
    def test_unknown_provider(self, client):
        response = client.get("/auth/social/start/myspace")

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid provider"

    def test_start_redirects_to_provider(self, client, supabase_client):
        supabase_client.auth.sign_in_with_oauth.return_value.url = "https://github.com/login/oauth/authorize?x=1"

        response = client.get("/auth/social/start/github", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "https://github.com/login/oauth/authorize?x=1"
        options = supabase_client.auth.sign_in_with_oauth.call_args.args[0]["options"]
        assert options["redirect_to"] == "http://localhost:5173/auth/social/complete/github"

    def test_provider_error_description(self, client, supabase_client):
        response = client.get(
            "/auth/social/complete/kakao",
            params={"error": "access_denied", "error_code": "403", "error_description": "User denied access"},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "User denied access"
        supabase_client.auth.exchange_code_for_session.assert_not_called()

    def test_missing_code(self, client):
        response = client.get("/auth/social/complete/github")

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid code"

    def test_code_exchange_sets_session(self, client, server, supabase_client):
        supabase_client.auth.exchange_code_for_session.side_effect = write_session(server)

        response = client.get("/auth/social/complete/github", params={"code": "abc"}, follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/"
        assert "sb-test-project-auth-token=base64-" in response.headers["set-cookie"]
        supabase_client.auth.exchange_code_for_session.assert_called_once_with({"auth_code": "abc"})
