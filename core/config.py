from dataclasses import dataclass
from datetime import timedelta
import os
import re

from dotenv import load_dotenv


class ConfigError(RuntimeError):
    pass


_DURATION = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_UNITS = {"": "seconds", "s": "seconds", "m": "minutes", "h": "hours", "d": "days"}


def parse_duration(value):
    """Parses "15m", "1d", "3600" style durations into a timedelta."""
    match = _DURATION.match(str(value))
    if not match:
        raise ConfigError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return timedelta(**{_UNITS[unit]: int(amount)})


def _flag(value):
    return str(value).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    access_token_secret: str
    refresh_token_secret: str
    database_url: str = "sqlite:///shopfront.db"
    access_token_expires: timedelta = timedelta(days=1)
    refresh_token_expires: timedelta = timedelta(days=10)
    cors_origin: str = "http://localhost:4000"
    cookie_secure: bool = True
    stripe_secret_key: str = ""
    payment_currency: str = "inr"
    payment_timeout: float = 10.0
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""
    upload_folder: str = "./public/temp"
    bcrypt_log_rounds: int = 12
    max_content_length: int = 5 * 1024 * 1024
    debug: bool = False

    @classmethod
    def from_env(cls, environ=None):
        load_dotenv()
        env = os.environ if environ is None else environ

        missing = [key for key in ("ACCESS_TOKEN_SECRET", "REFRESH_TOKEN_SECRET") if not env.get(key)]
        if missing:
            raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

        return cls(
            access_token_secret=env["ACCESS_TOKEN_SECRET"],
            refresh_token_secret=env["REFRESH_TOKEN_SECRET"],
            database_url=env.get("DATABASE_URL") or cls.database_url,
            access_token_expires=parse_duration(env.get("ACCESS_TOKEN_EXPIRY", "1d")),
            refresh_token_expires=parse_duration(env.get("REFRESH_TOKEN_EXPIRY", "10d")),
            cors_origin=env.get("CORS_ORIGIN", cls.cors_origin),
            cookie_secure=_flag(env.get("COOKIE_SECURE", "true")),
            stripe_secret_key=env.get("STRIPE_SECRET_KEY", ""),
            payment_currency=env.get("PAYMENT_CURRENCY", cls.payment_currency),
            payment_timeout=float(env.get("PAYMENT_TIMEOUT", cls.payment_timeout)),
            cloudinary_cloud_name=env.get("CLOUDINARY_CLOUD_NAME", ""),
            cloudinary_api_key=env.get("CLOUDINARY_API_KEY", ""),
            cloudinary_api_secret=env.get("CLOUDINARY_API_SECRET", ""),
            upload_folder=env.get("UPLOAD_FOLDER", cls.upload_folder),
            bcrypt_log_rounds=int(env.get("BCRYPT_LOG_ROUNDS", cls.bcrypt_log_rounds)),
            max_content_length=int(env.get("MAX_CONTENT_LENGTH", cls.max_content_length)),
            debug=_flag(env.get("DEBUG", "false")),
        )

    def flask_config(self):
        """Flask and extension settings derived from this configuration."""
        return {
            "SQLALCHEMY_DATABASE_URI": self.database_url,
            "SQLALCHEMY_TRACK_MODIFICATIONS": False,
            "JWT_SECRET_KEY": self.access_token_secret,
            "JWT_ACCESS_TOKEN_EXPIRES": self.access_token_expires,
            "JWT_TOKEN_LOCATION": ["cookies", "headers"],
            "JWT_ACCESS_COOKIE_NAME": "accessToken",
            "JWT_REFRESH_COOKIE_NAME": "refreshToken",
            "JWT_COOKIE_SECURE": self.cookie_secure,
            "JWT_COOKIE_CSRF_PROTECT": False,
            "BCRYPT_LOG_ROUNDS": self.bcrypt_log_rounds,
            "MAX_CONTENT_LENGTH": self.max_content_length,
            "UPLOAD_FOLDER": self.upload_folder,
            "SWAGGER": {"title": "Shopfront API", "uiversion": 3},
        }
