from datetime import datetime
from models.db import db


class Location(db.Model):
    __tablename__ = "locations"

    id = db.Column(db.Integer, primary_key=True)
    location_name = db.Column(db.String(120), nullable=False)
    address = db.Column(db.String(255), nullable=False)
    city = db.Column(db.String(120), nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)

    # owning manager: scopes every manager permission on spaces/bookings/payments below
    manager_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True, index=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    spaces = db.relationship("Space", back_populates="location", cascade="all, delete-orphan")

    def to_dict(self):
        return {
            "id": self.id,
            "location_name": self.location_name,
            "address": self.address,
            "city": self.city,
            "description": self.description,
            "manager_id": self.manager_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
