import io
import os
import shutil
import tempfile
import unittest

from core.config import Settings
from core.extensions import db
from main import create_app, seed_categories
from services.payments import PaymentConfirmation, PaymentError, to_minor_units

ACCESS_SECRET = "test-access-secret-0123456789abcdef"
REFRESH_SECRET = "test-refresh-secret-0123456789abcdef"

SELLER = {
    "name": "Demo Store",
    "email": "store@example.com",
    "password": "seller-pass-123",
    "phone": "9876543210",
    "address": "12 Market Road",
    "city": "Pune",
    "state": "Maharashtra",
    "zip": "411001",
    "country": "India",
}


class FakeGateway:
    def __init__(self):
        self.calls = []
        self.fail = False

    def charge(self, amount, payment_method, idempotency_key, metadata=None):
        self.calls.append({
            "amount": amount,
            "payment_method": payment_method,
            "idempotency_key": idempotency_key,
            "metadata": metadata,
        })
        if self.fail:
            raise PaymentError("Your card was declined.")
        return PaymentConfirmation(
            id=f"pi_test_{len(self.calls)}",
            status="succeeded",
            amount=to_minor_units(amount),
            currency="inr",
        )


class FakeImageHost:
    def __init__(self):
        self.uploads = []

    def upload(self, local_path):
        assert os.path.exists(local_path)
        name = os.path.basename(local_path)
        self.uploads.append(name)
        return f"https://images.test/{name}"


class ApiTestCase(unittest.TestCase):

    def setUp(self):
        self.upload_dir = tempfile.mkdtemp()
        self.gateway = FakeGateway()
        self.image_host = FakeImageHost()
        self.settings = Settings(
            access_token_secret=ACCESS_SECRET,
            refresh_token_secret=REFRESH_SECRET,
            database_url="sqlite://",
            cookie_secure=False,
            upload_folder=self.upload_dir,
            bcrypt_log_rounds=4,
        )
        self.app = create_app(self.settings, payment_gateway=self.gateway, image_host=self.image_host)
        self.app.config["TESTING"] = True
        with self.app.app_context():
            db.create_all()
            seed_categories()
        self.client = self.app.test_client()

    def tearDown(self):
        with self.app.app_context():
            db.session.remove()
            db.drop_all()
        shutil.rmtree(self.upload_dir, ignore_errors=True)

    # ---------- helpers ----------

    @staticmethod
    def bearer(token):
        return {"Authorization": f"Bearer {token}"}

    def signup_user(self, name="Jane Doe", email="jane@example.com", password="user-pass-123"):
        return self.client.post("/api/v1/users/signup", json={"name": name, "email": email, "password": password})

    def login_user(self, email="jane@example.com", password="user-pass-123", client=None):
        client = client or self.app.test_client()
        return client.post("/api/v1/users/login", json={"email": email, "password": password})

    def user_token(self, email="jane@example.com", password="user-pass-123", name="Jane Doe"):
        self.signup_user(name=name, email=email, password=password)
        return self.login_user(email, password).get_json()["data"]["accessToken"]

    def seller_token(self, **overrides):
        seller = dict(SELLER, **overrides)
        self.client.post("/api/v1/sellers/signup", json=seller)
        response = self.app.test_client().post(
            "/api/v1/sellers/login", json={"email": seller["email"], "password": seller["password"]}
        )
        return response.get_json()["data"]["accessToken"]

    def add_product(self, token, name="Smartphone X10", price="100", quantity="5",
                    category="Electronics", description="Phone with AI camera.", image=True):
        data = {
            "name": name,
            "description": description,
            "price": price,
            "quantity": quantity,
            "categoryName": category,
        }
        if image:
            data["productImage"] = (io.BytesIO(b"\x89PNG fake image"), "phone.png")
        return self.client.post(
            "/api/v1/products/add-product",
            data=data,
            content_type="multipart/form-data",
            headers=self.bearer(token),
        )
