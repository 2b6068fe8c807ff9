from novalgo.extensions import db
from novalgo.models.user import gen_uuid
from sqlalchemy.sql import func


class Profile(db.Model):
    __tablename__ = "profiles"

    id = db.Column(db.String(50), primary_key=True, default=gen_uuid)
    user_id = db.Column(
        db.String(50),
        db.ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )

    full_name = db.Column(db.String(255), nullable=False, default="User")
    phone = db.Column(db.String(30), nullable=False, default="")
    email = db.Column(db.String(255), nullable=False)

    # Issued once at provisioning, never rewritten.
    referral_code = db.Column(db.String(20), unique=True, nullable=False, index=True)
    referred_by = db.Column(db.String(50), db.ForeignKey("users.id"), nullable=True)

    experience_level = db.Column(db.String(50))
    how_heard_about = db.Column(db.String(100))
    terms_accepted = db.Column(db.Boolean, default=False)

    created_at = db.Column(db.DateTime, server_default=func.now())
    updated_at = db.Column(db.DateTime, server_default=func.now(), onupdate=func.now())

    user = db.relationship("User", foreign_keys=[user_id], back_populates="profile")
