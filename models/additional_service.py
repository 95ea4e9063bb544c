from models.db import db


class AdditionalService(db.Model):
    __tablename__ = "additional_services"

    id = db.Column(db.Integer, primary_key=True)
    service_name = db.Column(db.String(120), unique=True, nullable=False)
    description = db.Column(db.Text, nullable=True)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "service_name": self.service_name,
            "description": self.description,
            "price": str(self.price),
            "is_active": self.is_active,
        }
