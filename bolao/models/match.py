from datetime import datetime, timezone

from bolao import db
from bolao.utils.outcome import score_to_outcome
from bolao.utils.timezone_utils import isoformat_utc


class Match(db.Model):
    __tablename__ = "matches"

    id = db.Column(db.Integer, primary_key=True)
    round_id = db.Column(db.Integer, db.ForeignKey("rounds.id"), nullable=False)

    # Match timing, stored in UTC
    kickoff_at = db.Column(db.DateTime(timezone=True), nullable=False)

    # Teams
    home_team = db.Column(db.String(100), nullable=False)
    away_team = db.Column(db.String(100), nullable=False)

    # Scores, independently settable, null until entered
    home_score = db.Column(db.Integer)
    away_score = db.Column(db.Integer)

    # Timestamps
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    picks = db.relationship("Pick", backref="match", lazy="dynamic")

    __table_args__ = (
        db.Index("idx_match_round_kickoff", "round_id", "kickoff_at"),
        db.CheckConstraint(
            "home_score IS NULL OR home_score >= 0", name="home_score_non_negative"
        ),
        db.CheckConstraint(
            "away_score IS NULL OR away_score >= 0", name="away_score_non_negative"
        ),
    )

    def __repr__(self):
        return f"<Match {self.home_team} x {self.away_team} round_id={self.round_id}>"

    @property
    def outcome(self):
        """Outcome ("gabarito") from the scoreline, None until both are in"""
        return score_to_outcome(self.home_score, self.away_score)

    @property
    def is_scored(self):
        return self.home_score is not None and self.away_score is not None

    def to_dict(self):
        """Convert match to dictionary for API responses"""
        outcome = self.outcome
        return {
            "id": self.id,
            "kickoff_at": isoformat_utc(self.kickoff_at),
            "team1": self.home_team,
            "team2": self.away_team,
            "score1": self.home_score,
            "score2": self.away_score,
            "gabarito": outcome.label if outcome else None,
        }
