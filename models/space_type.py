from models.db import db


class SpaceType(db.Model):
    __tablename__ = "space_types"

    id = db.Column(db.Integer, primary_key=True)
    type_name = db.Column(db.String(80), unique=True, nullable=False)
    description = db.Column(db.Text, nullable=True)

    def to_dict(self):
        return {"id": self.id, "type_name": self.type_name, "description": self.description}
