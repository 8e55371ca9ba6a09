from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from messe.extensions import db


class User(UserMixin, db.Model):
    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False, default="Utilizador")
    email = db.Column(db.String(160), nullable=False, unique=True)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default="OPERATOR")
    avatar = db.Column(db.String(255))

    def set_password(self, senha: str):
        self.password_hash = generate_password_hash(senha)

    def check_password(self, senha: str) -> bool:
        return check_password_hash(self.password_hash, senha)

    @property
    def is_admin(self) -> bool:
        return self.role == "ADMIN"

    def to_dict(self):
        d = {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
        }
        if self.avatar:
            d["avatar"] = self.avatar
        return d

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"
