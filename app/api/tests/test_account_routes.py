"""Tests for the auth and user HTTP routes."""

import unittest
from unittest.mock import AsyncMock, patch

from fastapi.security import HTTPAuthorizationCredentials
from fastapi.testclient import TestClient

from app.api import deps
from app.core.config import get_settings
from app.core.errors import NotificationError, UnauthorizedError
from app.core.security import TokenIssuer
from app.main import app
from app.services.account import AccountService
from app.stores.fake import FakeMailer, FakeOTPStore, FakeUserStore

EMAIL = "ben@x.com"
REGISTER_BODY = {
    "name": "Ben",
    "email": EMAIL,
    "password": "Password1!",
    "confirmPassword": "Password1!",
}


class RouteTestCase(unittest.TestCase):
    def setUp(self):
        self.settings = get_settings()
        self.users = FakeUserStore()
        self.codes = FakeOTPStore()
        self.mailer = FakeMailer()
        self.tokens = TokenIssuer(self.settings)
        self.service = AccountService(
            users=self.users,
            codes=self.codes,
            tokens=self.tokens,
            mailer=self.mailer,
            config=self.settings,
        )
        app.dependency_overrides[deps.get_account_service] = lambda: self.service
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    def register(self):
        return self.client.post("/auth/register", json=REGISTER_BODY)


class TestAuthRoutes(RouteTestCase):
    def test_register_returns_201_with_user_and_token(self):
        response = self.register()

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["message"], "User created successfully")
        self.assertEqual(body["user"]["email"], EMAIL)
        self.assertFalse(body["user"]["isVerified"])
        self.assertNotIn("hashedPassword", body["user"])
        self.assertNotIn("hashed_password", body["user"])
        self.assertEqual(self.tokens.decode(body["token"]), str(body["user"]["id"]))

    def test_register_duplicate_returns_409_message(self):
        self.register()
        response = self.register()

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json(), {"message": "User with this email already exists"})

    def test_register_validation_error_returns_400_with_details(self):
        body = dict(REGISTER_BODY, confirmPassword="Different1!")
        response = self.client.post("/auth/register", json=body)

        self.assertEqual(response.status_code, 400)
        payload = response.json()
        self.assertEqual(payload["message"], "Validation error")
        self.assertTrue(payload["details"])
        self.assertNotIn("input", payload["details"][0])
        self.assertFalse(self.users.users)

    def test_register_rejects_weak_password(self):
        body = dict(REGISTER_BODY, password="password", confirmPassword="password")
        response = self.client.post("/auth/register", json=body)
        self.assertEqual(response.status_code, 400)

    def test_register_delivery_failure_returns_500(self):
        self.mailer.fail_with = NotificationError("Failed to send verification code.")

        response = self.register()

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"message": "Failed to send verification code."})

    def test_login_success_and_failures(self):
        self.register()

        ok = self.client.post("/auth/login", json={"email": EMAIL, "password": "Password1!"})
        wrong = self.client.post("/auth/login", json={"email": EMAIL, "password": "Nope1234!"})
        unknown = self.client.post("/auth/login", json={"email": "nobody@x.com", "password": "Password1!"})

        self.assertEqual(ok.status_code, 200)
        self.assertEqual(ok.json()["message"], "Login successful")
        self.assertIn("token", ok.json())
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(unknown.status_code, 401)
        self.assertEqual(wrong.json(), unknown.json())
        self.assertEqual(wrong.json(), {"message": "Invalid email or password"})

    def test_verify_email_flow(self):
        self.register()
        code = self.mailer.last_code_for(EMAIL)

        response = self.client.post("/auth/verify-email", json={"email": EMAIL, "otp": code})
        replay = self.client.post("/auth/verify-email", json={"email": EMAIL, "otp": code})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"message": "Email verified successfully"})
        self.assertTrue(self.users.users[EMAIL].is_verified)
        self.assertEqual(replay.status_code, 401)
        self.assertEqual(replay.json(), {"message": "OTP is not valid"})

    def test_verify_email_unknown_user_is_404(self):
        response = self.client.post("/auth/verify-email", json={"email": "nobody@x.com", "otp": "123456"})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"message": "User not found"})

    def test_verify_email_rejects_overlong_code(self):
        response = self.client.post("/auth/verify-email", json={"email": EMAIL, "otp": "1234567"})
        self.assertEqual(response.status_code, 400)

    def test_send_verification_code(self):
        self.register()

        response = self.client.post("/auth/send-verification-code", json={"email": EMAIL})
        missing = self.client.post("/auth/send-verification-code", json={"email": "nobody@x.com"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"message": "OTP sent successfully"})
        self.assertEqual(len(self.mailer.sent), 2)
        self.assertEqual(missing.status_code, 404)


class TestPasswordResetRoutes(RouteTestCase):
    def test_full_password_reset_flow(self):
        self.register()

        requested = self.client.post("/user/request-password-reset", json={"email": EMAIL})
        code = self.mailer.last_code_for(EMAIL)
        verified = self.client.post("/user/verify-password-reset", json={"email": EMAIL, "otp": code})
        reset = self.client.patch(
            "/user/password-reset",
            json={"email": EMAIL, "password": "NewPass1!", "confirmPassword": "NewPass1!"},
        )

        self.assertEqual(requested.json(), {"message": "OTP sent successfully"})
        self.assertEqual(verified.json(), {"message": "OTP verified successfully"})
        self.assertEqual(reset.status_code, 200)
        self.assertEqual(reset.json(), {"message": "Password reset successfully"})

        new_login = self.client.post("/auth/login", json={"email": EMAIL, "password": "NewPass1!"})
        old_login = self.client.post("/auth/login", json={"email": EMAIL, "password": "Password1!"})
        self.assertEqual(new_login.status_code, 200)
        self.assertEqual(old_login.status_code, 401)

    def test_reset_unknown_email_is_404(self):
        response = self.client.patch(
            "/user/password-reset",
            json={"email": "nobody@x.com", "password": "NewPass1!", "confirmPassword": "NewPass1!"},
        )
        self.assertEqual(response.status_code, 404)

    def test_verify_reset_with_wrong_code_is_401(self):
        self.register()
        code = self.mailer.last_code_for(EMAIL)
        wrong = "000000" if code != "000000" else "111111"

        response = self.client.post("/user/verify-password-reset", json={"email": EMAIL, "otp": wrong})

        self.assertEqual(response.status_code, 401)


class TestUserLookupRoutes(RouteTestCase):
    def test_requires_authentication(self):
        response = self.client.get("/user")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"message": "Not authenticated"})

    def test_list_and_get_with_authenticated_user(self):
        user = self.register().json()["user"]
        app.dependency_overrides[deps.get_current_user] = lambda: self.users.users[EMAIL]

        listing = self.client.get("/user")
        detail = self.client.get(f"/user/{user['id']}")
        missing = self.client.get("/user/999")

        self.assertEqual(listing.status_code, 200)
        self.assertEqual(listing.json()["count"], 1)
        self.assertTrue(listing.json()["success"])
        self.assertEqual(listing.json()["users"][0]["email"], EMAIL)
        self.assertEqual(detail.json()["user"]["name"], "Ben")
        self.assertEqual(missing.status_code, 404)


class TestGetCurrentUser(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.tokens = TokenIssuer(get_settings())
        self.session = AsyncMock()

    def bearer(self, token: str) -> HTTPAuthorizationCredentials:
        return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)

    @patch("app.api.deps.UserStore")
    async def test_valid_token_resolves_user(self, mock_store_cls):
        stored_user = object()
        mock_store_cls.return_value.find_by_id = AsyncMock(return_value=stored_user)

        user = await deps.get_current_user(self.bearer(self.tokens.issue(5)), self.tokens, self.session)

        self.assertIs(user, stored_user)
        mock_store_cls.return_value.find_by_id.assert_awaited_once_with(5)

    async def test_invalid_token_is_unauthorized(self):
        with self.assertRaises(UnauthorizedError):
            await deps.get_current_user(self.bearer("garbage"), self.tokens, self.session)

    @patch("app.api.deps.UserStore")
    async def test_token_for_deleted_user_is_unauthorized(self, mock_store_cls):
        mock_store_cls.return_value.find_by_id = AsyncMock(return_value=None)

        with self.assertRaises(UnauthorizedError):
            await deps.get_current_user(self.bearer(self.tokens.issue(5)), self.tokens, self.session)


class TestHealthcheck(unittest.TestCase):
    def test_root_reports_running(self):
        response = TestClient(app).get("/")
        self.assertEqual(response.status_code, 200)

    def test_unknown_route_uses_message_envelope(self):
        response = TestClient(app).get("/does-not-exist")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"message": "Not Found"})


if __name__ == "__main__":
    unittest.main()
