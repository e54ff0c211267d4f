from models.base_model import Base, BaseModel
from sqlalchemy import Column, String


class Admin(BaseModel, Base):
    """Credential record for a CMS administrator."""
    __tablename__ = "admins"

    full_name = Column(String(255), nullable=False)
    username = Column(String(64), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)

