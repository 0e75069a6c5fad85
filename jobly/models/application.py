"""
Application model: a user's interest in a job.

One row per (username, job_id). The state column is limited to the
ApplicationState values.
"""

import enum
from sqlalchemy import Column, Integer, String, Text, ForeignKey, CheckConstraint
from jobly.core.database import Base


class ApplicationState(str, enum.Enum):
    """
    Application state lifecycle:

    INTERESTED -> APPLIED -> ACCEPTED
                        ↘ REJECTED
    """
    INTERESTED = "interested"
    APPLIED = "applied"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


_STATES = ", ".join(f"'{state.value}'" for state in ApplicationState)


class Application(Base):
    __tablename__ = "applications"
    __table_args__ = (
        CheckConstraint(f"state IN ({_STATES})", name="ck_applications_state"),
    )

    username = Column(
        String(25),
        ForeignKey("users.username", ondelete="CASCADE"),
        primary_key=True,
    )
    job_id = Column(
        Integer,
        ForeignKey("jobs.id", ondelete="CASCADE"),
        primary_key=True,
    )
    state = Column(Text, nullable=False, default=ApplicationState.APPLIED.value)

    def __repr__(self):
        return f"<Application(username='{self.username}', job_id={self.job_id}, state='{self.state}')>"
