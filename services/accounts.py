from core.auth import ROLES, generate_access_token, generate_refresh_token, decode_refresh_token
from core.errors import ValidationError, AuthenticationError, NotFoundError, ConflictError
from core.logger import get_logger
from core.security import verify_password

logger = get_logger(__name__)


def missing_fields(data, fields):
    return [field for field in fields if not str(data.get(field) or "").strip()]


def require_password_strings(*passwords):
    if not all(isinstance(password, str) for password in passwords):
        raise ValidationError("Password must be a string.")


class AccountService:
    """Registration and token lifecycle for one account role."""

    def __init__(self, role, label, signup_fields, update_fields):
        self.role = role
        self.label = label
        self.repository = ROLES[role]
        self.signup_fields = signup_fields
        self.update_fields = update_fields

    def signup(self, data):
        if missing_fields(data, self.signup_fields):
            raise ValidationError("Please provide all required fields.")
        require_password_strings(data["password"])

        email = str(data["email"]).strip().lower()
        if self.repository.email_taken(email):
            raise ConflictError(f"{self.label} with the given email already exists.")

        fields = {field: str(data[field]).strip() for field in self.signup_fields if field != "password"}
        fields["email"] = email
        account = self.repository.create(password=data["password"], **fields)
        logger.info(f"{self.label} {account.id} signed up")
        return account

    def issue_tokens(self, account):
        access_token = generate_access_token(account, self.role)
        refresh_token = generate_refresh_token(account, self.role)
        self.repository.set_refresh_token(account, refresh_token)
        return access_token, refresh_token

    def login(self, email, password):
        if not email or not password:
            raise ValidationError("Please provide email and password.")
        require_password_strings(password)

        account = self.repository.find_by_email(str(email))
        if not account:
            raise NotFoundError(f"{self.label} does not exist.")

        if not verify_password(account.password, password):
            raise AuthenticationError("Invalid email or password.")

        access_token, refresh_token = self.issue_tokens(account)
        logger.info(f"{self.label} {account.id} logged in")
        return account, access_token, refresh_token

    def refresh(self, incoming_token):
        if not incoming_token:
            raise AuthenticationError("Please provide a refresh token.")

        account_id = decode_refresh_token(incoming_token, self.role)
        account = self.repository.get(account_id)
        if not account:
            logger.warning(f"Refresh token for unknown {self.role} {account_id}")
            raise AuthenticationError("Invalid refresh token.")

        if account.refresh_token != incoming_token:
            logger.warning(f"Stale refresh token presented for {self.role} {account.id}")
            raise AuthenticationError("Refresh token is expired or used.")

        return self.issue_tokens(account)

    def logout(self, account):
        self.repository.set_refresh_token(account, None)
        logger.info(f"{self.label} {account.id} logged out")

    def change_password(self, account, old_password, new_password):
        if not old_password or not new_password:
            raise ValidationError("Please provide old and new password.")
        require_password_strings(old_password, new_password)
        if old_password == new_password:
            raise ValidationError("New password must be different from old password.")
        if not verify_password(account.password, old_password):
            raise AuthenticationError("Invalid old password.")
        self.repository.set_password(account, new_password)

    def update_account(self, account, data, require_all=False):
        """
        Updates the profile fields present in data. With require_all every
        updatable field must be supplied, otherwise at least one.
        """
        provided = {
            field: str(data[field]).strip()
            for field in self.update_fields
            if str(data.get(field) or "").strip()
        }
        if require_all and len(provided) != len(self.update_fields):
            raise ValidationError(f"Please provide {' and '.join(self.update_fields)}.")
        if not provided:
            raise ValidationError("Please provide at least one field to update.")

        if "email" in provided:
            provided["email"] = provided["email"].lower()
            if self.repository.email_taken(provided["email"], exclude_id=account.id):
                raise ConflictError("Email already in use.")

        return self.repository.update(account, **provided)


user_accounts = AccountService(
    role="user",
    label="User",
    signup_fields=("name", "email", "password"),
    update_fields=("name", "email"),
)

seller_accounts = AccountService(
    role="seller",
    label="Seller",
    signup_fields=("name", "email", "password", "phone", "address", "city", "state", "zip", "country"),
    update_fields=("name", "email", "phone", "address", "city", "state", "zip", "country"),
)
