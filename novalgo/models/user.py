from novalgo.extensions import db
from sqlalchemy.sql import func
import uuid


def gen_uuid():
    return str(uuid.uuid4())


class User(db.Model):
    """Identity record; the profile and wallet hang off it one-to-one."""

    __tablename__ = "users"

    id = db.Column(db.String(50), primary_key=True, default=gen_uuid)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default="investor")
    created_at = db.Column(db.DateTime, server_default=func.now())

    profile = db.relationship(
        "Profile",
        foreign_keys="Profile.user_id",
        back_populates="user",
        uselist=False,
    )
    wallet = db.relationship("Wallet", back_populates="user", uselist=False)

    @property
    def is_admin(self):
        return self.role == "admin"
