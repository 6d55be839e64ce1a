from core.extensions import db
from core.imports import func
from core.security import hash_password
from models.userModel import Users, Sellers


class AccountRepository:
    """Data access for one account kind (Users or Sellers)."""

    def __init__(self, model):
        self.model = model

    def get(self, account_id):
        try:
            return db.session.get(self.model, int(account_id))
        except (TypeError, ValueError):
            return None

    def find_by_email(self, email):
        return self.model.query.filter(func.lower(self.model.email) == email.strip().lower()).first()

    def email_taken(self, email, exclude_id=None):
        query = self.model.query.filter(func.lower(self.model.email) == email.strip().lower())
        if exclude_id is not None:
            query = query.filter(self.model.id != exclude_id)
        return query.first() is not None

    def create(self, password, **fields):
        account = self.model(password=hash_password(password), **fields)
        db.session.add(account)
        db.session.commit()
        return account

    def set_password(self, account, password):
        account.password = hash_password(password)
        db.session.commit()

    def set_refresh_token(self, account, token):
        account.refresh_token = token
        db.session.commit()

    def update(self, account, **fields):
        for key, value in fields.items():
            setattr(account, key, value)
        db.session.commit()
        return account


users = AccountRepository(Users)
sellers = AccountRepository(Sellers)
