from datetime import datetime, timezone

from bolao import db
from bolao.utils.crypto import try_decode_pick


class Pick(db.Model):
    __tablename__ = "picks"

    id = db.Column(db.Integer, primary_key=True)

    # Pick identification
    player_id = db.Column(db.Integer, db.ForeignKey("players.id"), nullable=False)
    match_id = db.Column(db.Integer, db.ForeignKey("matches.id"), nullable=False)

    # Fernet token of the chosen outcome, never stored in plaintext
    encrypted_choice = db.Column(db.Text, nullable=False)

    # Timestamps
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Constraints and indexes
    __table_args__ = (
        db.UniqueConstraint("player_id", "match_id", name="unique_player_match_pick"),
        db.Index("idx_pick_match", "match_id"),
    )

    def __repr__(self):
        return f"<Pick player_id={self.player_id} match_id={self.match_id}>"

    def decoded(self):
        """Decrypted outcome, None when the stored token is unreadable"""
        return try_decode_pick(self.encrypted_choice, pick_id=self.id)

    @staticmethod
    def for_matches(match_ids):
        """All picks pointing at the given matches"""
        if not match_ids:
            return []
        return Pick.query.filter(Pick.match_id.in_(match_ids)).all()
