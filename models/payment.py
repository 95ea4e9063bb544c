from datetime import datetime
from models.db import db

PAYMENT_COMPLETED = "completed"
PAYMENT_FAILED = "failed"
PAYMENT_REFUNDED = "refunded"
# never written by the simulated gateway, but still blocks a second payment
PAYMENT_PENDING = "pending"

PAYMENT_STATUSES = (PAYMENT_COMPLETED, PAYMENT_FAILED, PAYMENT_REFUNDED)
BLOCKING_PAYMENT_STATUSES = (PAYMENT_COMPLETED, PAYMENT_PENDING)


class Payment(db.Model):
    __tablename__ = "payments"

    id = db.Column(db.Integer, primary_key=True)
    booking_id = db.Column(db.Integer, db.ForeignKey("bookings.id"), nullable=False, index=True)

    amount = db.Column(db.Numeric(10, 2), nullable=False)
    payment_method = db.Column(db.String(40), nullable=False)

    status = db.Column(db.String(20), nullable=False, default=PAYMENT_COMPLETED)
    transaction_id = db.Column(db.String(255), nullable=True, unique=True)

    payment_date = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    booking = db.relationship("Booking", back_populates="payments")

    def to_dict(self):
        return {
            "id": self.id,
            "booking_id": self.booking_id,
            "amount": str(self.amount),
            "payment_method": self.payment_method,
            "status": self.status,
            "transaction_id": self.transaction_id,
            "payment_date": self.payment_date.isoformat() if self.payment_date else None,
        }
