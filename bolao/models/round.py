from datetime import datetime, timezone

from bolao import db
from bolao.utils.reveal import as_utc, is_revealed


class Round(db.Model):
    """A block of matches predicted together ("rodada")"""

    __tablename__ = "rounds"

    id = db.Column(db.Integer, primary_key=True)
    number = db.Column(db.Integer, nullable=False, unique=True, index=True)

    # Timestamps
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    # No delete cascade: matches, and the picks pointing at them, outlive edits
    matches = db.relationship("Match", backref="round", lazy="dynamic")

    __table_args__ = (
        db.CheckConstraint("number >= 1", name="round_number_positive"),
    )

    def __repr__(self):
        return f"<Round {self.number}>"

    @property
    def kickoff_min(self):
        """Earliest kickoff among the round's matches, None when it has none"""
        from .match import Match

        kickoff = (
            db.session.query(db.func.min(Match.kickoff_at))
            .filter(Match.round_id == self.id)
            .scalar()
        )
        return as_utc(kickoff)

    def is_revealed(self, now=None):
        """Picks are visible and locked once the first match kicks off"""
        return is_revealed(self.kickoff_min, now)

    def get_matches(self):
        """Matches ordered by kickoff, ties broken by id"""
        from .match import Match

        return self.matches.order_by(Match.kickoff_at, Match.id).all()

    @staticmethod
    def get_by_number(number):
        return Round.query.filter_by(number=number).first()

    @staticmethod
    def get_latest():
        """Highest-numbered round, the one currently being played"""
        return Round.query.order_by(Round.number.desc()).first()

    def to_dict(self, now=None):
        kickoff_min = self.kickoff_min
        return {
            "id": self.id,
            "round": self.number,
            "kickoffMin": kickoff_min.isoformat() if kickoff_min else None,
            "isRevealed": is_revealed(kickoff_min, now),
        }
