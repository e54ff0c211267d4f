"""
Credential store: identifier -> admin record lookups used by the auth handshake.
"""
from __future__ import annotations

from typing import Optional

from models.admin import Admin


class CredentialStore:
    def __init__(self, storage):
        self.storage = storage

    @property
    def session(self):
        return self.storage.get_session()

    def find_by_username(self, username: str) -> Optional[Admin]:
        return self.session.query(Admin).filter(Admin.username == username).first()

    def username_exists(self, username: str) -> bool:
        return self.session.query(self.session.query(Admin).filter(Admin.username == username).exists()).scalar()

    def email_exists(self, email: str) -> bool:
        return self.session.query(self.session.query(Admin).filter(Admin.email == email).exists()).scalar()

    def count(self) -> int:
        return self.storage.count(Admin)

    def create(self, full_name: str, username: str, email: str, password_hash: str) -> Admin:
        admin = Admin(full_name=full_name, username=username, email=email, password_hash=password_hash)
        self.storage.new(admin)
        self.storage.save()
        return admin
