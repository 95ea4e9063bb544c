from models.db import db


class Availability(db.Model):
    __tablename__ = "availability"

    id = db.Column(db.Integer, primary_key=True)

    space_id = db.Column(db.Integer, db.ForeignKey("spaces.id"), nullable=False, index=True)
    availability_date = db.Column(db.Date, nullable=False, index=True)
    start_time = db.Column(db.Time, nullable=False)
    end_time = db.Column(db.Time, nullable=False)
    is_available = db.Column(db.Boolean, default=True, nullable=False)

    __table_args__ = (
        # Blocks may overlap; only exact duplicates are rejected
        db.UniqueConstraint(
            "space_id", "availability_date", "start_time", "end_time",
            name="uq_availability_space_window",
        ),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "space_id": self.space_id,
            "availability_date": self.availability_date.isoformat(),
            "start_time": self.start_time.strftime("%H:%M:%S"),
            "end_time": self.end_time.strftime("%H:%M:%S"),
            "is_available": self.is_available,
        }
