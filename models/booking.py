from datetime import datetime
from models.db import db

STATUS_PENDING = "pending"
STATUS_CONFIRMED = "confirmed"
STATUS_CANCELLED = "cancelled"
STATUS_COMPLETED = "completed"

BOOKING_STATUSES = (STATUS_PENDING, STATUS_CONFIRMED, STATUS_CANCELLED, STATUS_COMPLETED)
# bookings in these states hold their time window
ACTIVE_STATUSES = (STATUS_PENDING, STATUS_CONFIRMED)
TERMINAL_STATUSES = (STATUS_CANCELLED, STATUS_COMPLETED)


class Booking(db.Model):
    __tablename__ = "bookings"

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    space_id = db.Column(db.Integer, db.ForeignKey("spaces.id"), nullable=False, index=True)

    booking_date = db.Column(db.Date, nullable=False, index=True)
    start_time = db.Column(db.Time, nullable=False)
    end_time = db.Column(db.Time, nullable=False)

    total_hours = db.Column(db.Numeric(5, 2), nullable=False)
    total_price = db.Column(db.Numeric(10, 2), nullable=False)

    status = db.Column(db.String(20), nullable=False, default=STATUS_PENDING, index=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    user = db.relationship("User", back_populates="bookings")
    space = db.relationship("Space")
    payments = db.relationship("Payment", back_populates="booking", cascade="all, delete-orphan")

    __table_args__ = (
        db.Index("ix_bookings_space_date", "space_id", "booking_date"),
    )

    def to_dict(self):
        space = self.space
        return {
            "id": self.id,
            "user_id": self.user_id,
            "space_id": self.space_id,
            "booking_date": self.booking_date.isoformat(),
            "start_time": self.start_time.strftime("%H:%M:%S"),
            "end_time": self.end_time.strftime("%H:%M:%S"),
            "total_hours": str(self.total_hours),
            "total_price": str(self.total_price),
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "space_name": space.space_name if space else None,
            "location_id": space.location_id if space else None,
        }
