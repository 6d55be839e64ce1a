from core.extensions import db
from models.userModel import Users

from support import ApiTestCase


class SignupTestCase(ApiTestCase):

    def test_signup_returns_sanitized_user_in_envelope(self):
        response = self.signup_user()
        self.assertEqual(response.status_code, 201)
        body = response.get_json()
        self.assertTrue(body["success"])
        self.assertEqual(body["statusCode"], 201)
        self.assertEqual(body["data"]["email"], "jane@example.com")
        self.assertNotIn("password", body["data"])
        self.assertNotIn("refreshToken", body["data"])

    def test_password_is_stored_hashed(self):
        self.signup_user(password="user-pass-123")
        with self.app.app_context():
            user = Users.query.filter_by(email="jane@example.com").one()
            self.assertNotEqual(user.password, "user-pass-123")

    def test_duplicate_email_is_rejected_without_new_row(self):
        self.signup_user()
        response = self.signup_user(name="Other", email="JANE@example.com")
        self.assertEqual(response.status_code, 409)
        body = response.get_json()
        self.assertFalse(body["success"])
        self.assertIsNone(body["data"])
        with self.app.app_context():
            self.assertEqual(Users.query.count(), 1)

    def test_non_string_password(self):
        response = self.client.post("/api/v1/users/signup",
                                    json={"name": "Jane", "email": "jane@example.com", "password": 12345678})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["errors"][0]["kind"], "validation_error")
        with self.app.app_context():
            self.assertEqual(Users.query.count(), 0)

    def test_missing_fields(self):
        response = self.client.post("/api/v1/users/signup", json={"email": "x@example.com"})
        self.assertEqual(response.status_code, 400)
        body = response.get_json()
        self.assertEqual(body["errors"][0]["kind"], "validation_error")


class LoginTestCase(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.signup_user()

    def test_login_sets_httponly_cookies_and_returns_tokens(self):
        response = self.login_user()
        self.assertEqual(response.status_code, 200)
        data = response.get_json()["data"]
        self.assertIn("accessToken", data)
        self.assertIn("refreshToken", data)
        self.assertNotIn("password", data["user"])

        cookies = response.headers.getlist("Set-Cookie")
        access = [c for c in cookies if c.startswith("accessToken=")]
        refresh = [c for c in cookies if c.startswith("refreshToken=")]
        self.assertEqual(len(access), 1)
        self.assertEqual(len(refresh), 1)
        self.assertIn("HttpOnly", access[0])
        self.assertIn("HttpOnly", refresh[0])

        with self.app.app_context():
            user = Users.query.filter_by(email="jane@example.com").one()
            self.assertEqual(user.refresh_token, data["refreshToken"])

    def test_wrong_password(self):
        response = self.login_user(password="nope")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.headers.getlist("Set-Cookie"), [])

    def test_unknown_email(self):
        response = self.login_user(email="ghost@example.com")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.headers.getlist("Set-Cookie"), [])

    def test_current_user_with_bearer_header(self):
        token = self.login_user().get_json()["data"]["accessToken"]
        response = self.app.test_client().get("/api/v1/users/current-user", headers=self.bearer(token))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["data"]["email"], "jane@example.com")

    def test_current_user_with_cookie(self):
        client = self.app.test_client()
        self.login_user(client=client)
        response = client.get("/api/v1/users/current-user")
        self.assertEqual(response.status_code, 200)

    def test_missing_token(self):
        response = self.client.get("/api/v1/users/current-user")
        self.assertEqual(response.status_code, 401)
        body = response.get_json()
        self.assertFalse(body["success"])
        self.assertEqual(body["message"], "Unauthorized request")

    def test_garbage_token(self):
        response = self.client.get("/api/v1/users/current-user", headers=self.bearer("not-a-jwt"))
        self.assertEqual(response.status_code, 401)

    def test_refresh_token_is_not_an_access_token(self):
        refresh_token = self.login_user().get_json()["data"]["refreshToken"]
        response = self.client.get("/api/v1/users/current-user", headers=self.bearer(refresh_token))
        self.assertEqual(response.status_code, 401)

    def test_seller_token_rejected_on_user_routes(self):
        token = self.seller_token()
        response = self.client.get("/api/v1/users/current-user", headers=self.bearer(token))
        self.assertEqual(response.status_code, 401)

    def test_deleted_account_token_rejected(self):
        token = self.login_user().get_json()["data"]["accessToken"]
        with self.app.app_context():
            db.session.delete(Users.query.one())
            db.session.commit()
        response = self.client.get("/api/v1/users/current-user", headers=self.bearer(token))
        self.assertEqual(response.status_code, 401)


class RefreshTestCase(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.signup_user()
        self.tokens = self.login_user().get_json()["data"]

    def refresh(self, token):
        return self.app.test_client().post("/api/v1/users/refresh-token", json={"refreshToken": token})

    def test_refresh_rotates_tokens(self):
        response = self.refresh(self.tokens["refreshToken"])
        self.assertEqual(response.status_code, 200)
        data = response.get_json()["data"]
        self.assertNotEqual(data["refreshToken"], self.tokens["refreshToken"])

        self.assertEqual(self.refresh(self.tokens["refreshToken"]).status_code, 401)
        self.assertEqual(self.refresh(data["refreshToken"]).status_code, 200)

    def test_refresh_from_cookie(self):
        client = self.app.test_client()
        self.login_user(client=client)
        response = client.post("/api/v1/users/refresh-token")
        self.assertEqual(response.status_code, 200)

    def test_refresh_requires_token(self):
        response = self.refresh(None)
        self.assertEqual(response.status_code, 401)

    def test_refresh_rejects_access_token(self):
        self.assertEqual(self.refresh(self.tokens["accessToken"]).status_code, 401)

    def test_user_refresh_token_rejected_by_seller_endpoint(self):
        response = self.app.test_client().post(
            "/api/v1/sellers/refresh-token", json={"refreshToken": self.tokens["refreshToken"]}
        )
        self.assertEqual(response.status_code, 401)

    def test_logout_clears_refresh_token_and_cookies(self):
        response = self.client.post("/api/v1/users/logout", headers=self.bearer(self.tokens["accessToken"]))
        self.assertEqual(response.status_code, 200)

        cleared = [c for c in response.headers.getlist("Set-Cookie")
                   if c.startswith("accessToken=;") or c.startswith("refreshToken=;")]
        self.assertEqual(len(cleared), 2)

        with self.app.app_context():
            self.assertIsNone(Users.query.one().refresh_token)

        self.assertEqual(self.refresh(self.tokens["refreshToken"]).status_code, 401)


class AccountTestCase(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.token = self.user_token()

    def test_change_password(self):
        headers = self.bearer(self.token)
        response = self.client.post("/api/v1/users/change-password", headers=headers,
                                    json={"oldPassword": "wrong", "newPassword": "brand-new-pass"})
        self.assertEqual(response.status_code, 401)

        response = self.client.post("/api/v1/users/change-password", headers=headers,
                                    json={"oldPassword": "user-pass-123", "newPassword": "user-pass-123"})
        self.assertEqual(response.status_code, 400)

        response = self.client.post("/api/v1/users/change-password", headers=headers,
                                    json={"oldPassword": "user-pass-123", "newPassword": "brand-new-pass"})
        self.assertEqual(response.status_code, 200)

        self.assertEqual(self.login_user(password="user-pass-123").status_code, 401)
        self.assertEqual(self.login_user(password="brand-new-pass").status_code, 200)

    def test_non_string_passwords(self):
        headers = self.bearer(self.token)
        response = self.client.post("/api/v1/users/change-password", headers=headers,
                                    json={"oldPassword": "user-pass-123", "newPassword": 87654321})
        self.assertEqual(response.status_code, 400)

        response = self.client.post("/api/v1/users/login",
                                    json={"email": "jane@example.com", "password": 12345678})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.login_user(password="user-pass-123").status_code, 200)

    def test_update_account(self):
        response = self.client.post("/api/v1/users/update-account", headers=self.bearer(self.token),
                                    json={"name": "Jane Smith", "email": "jane.smith@example.com"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["data"]["name"], "Jane Smith")

    def test_update_account_requires_name_and_email(self):
        response = self.client.post("/api/v1/users/update-account", headers=self.bearer(self.token),
                                    json={"name": "Jane Smith"})
        self.assertEqual(response.status_code, 400)

    def test_update_account_email_conflict(self):
        self.signup_user(name="Bob", email="bob@example.com")
        response = self.client.post("/api/v1/users/update-account", headers=self.bearer(self.token),
                                    json={"name": "Jane", "email": "bob@example.com"})
        self.assertEqual(response.status_code, 409)
