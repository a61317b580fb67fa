"""Todo model definition."""

from utils.security import utcnow

from . import db


class Todo(db.Model):
    """A todo item with a title, description and duration."""

    __tablename__ = "todos"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    duration = db.Column(db.Float, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=True)

    def touch(self) -> None:
        self.updated_at = utcnow()

    def to_dict(self) -> dict:
        """Serialize the todo to a dictionary."""

        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "duration": self.duration,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self) -> str:
        return f"<Todo id={self.id} title={self.title!r}>"
