from datetime import datetime, timezone

from flask_login import UserMixin
from werkzeug.security import check_password_hash, generate_password_hash

from bolao import db


class Player(UserMixin, db.Model):
    __tablename__ = "players"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(80), unique=True, nullable=False, index=True)

    # Null until the first login, which sets it
    password_hash = db.Column(db.String(255))

    # Account status
    active = db.Column(db.Boolean, default=True, nullable=False)
    is_admin = db.Column(db.Boolean, default=False, nullable=False)

    # Timestamps
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    last_login = db.Column(db.DateTime)

    # Relationships
    picks = db.relationship(
        "Pick", backref="player", lazy="dynamic", cascade="all, delete-orphan"
    )

    __table_args__ = (db.Index("idx_player_active", "active"),)

    def __repr__(self):
        return f"<Player {self.name}>"

    @property
    def is_active(self):
        """Flask-Login refuses inactive players"""
        return bool(self.active)

    @property
    def has_password(self):
        return bool(self.password_hash)

    def set_password(self, password):
        """Set password hash"""
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        """Check password against hash"""
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    def update_last_login(self):
        self.last_login = datetime.now(timezone.utc)

    @staticmethod
    def find_by_name(name):
        """Case-insensitive lookup used by the login form"""
        return Player.query.filter(
            db.func.lower(Player.name) == (name or "").strip().lower()
        ).first()

    @staticmethod
    def get_active_players():
        """Active players ordered by name"""
        return Player.query.filter_by(active=True).order_by(Player.name, Player.id).all()

    def to_dict(self):
        """Convert player to dictionary for API responses"""
        return {"id": self.id, "name": self.name}
