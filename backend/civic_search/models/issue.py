"""Issue, tag, vote and comment models"""
from sqlalchemy import (
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from ..database import Base


class Issue(Base):
    """A citizen-reported issue"""

    __tablename__ = "issues"

    id = Column(String(36), primary_key=True)  # UUID

    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    # Case- and diacritic-folded title + description, matched by free-text search
    search_text = Column(Text, nullable=False, default="")

    category = Column(String(50), index=True)
    priority = Column(String(20), index=True)
    status = Column(String(20), index=True)

    # Location (all three null when the reporter gave no location)
    lat = Column(Float, nullable=True)
    lng = Column(Float, nullable=True)
    address = Column(String(500), nullable=True)

    # Denormalised net votes (up - down), kept in step with issue_votes
    vote_count = Column(Integer, nullable=False, default=0, index=True)

    created_by = Column(String(36), nullable=True)

    # Timestamps (naive UTC)
    created_at = Column(DateTime, nullable=False, index=True)
    updated_at = Column(DateTime, nullable=False)

    tags = relationship(
        "IssueTag", cascade="all, delete-orphan", lazy="selectin"
    )
    votes = relationship(
        "IssueVote", cascade="all, delete-orphan", lazy="selectin"
    )
    comments = relationship(
        "IssueComment",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="IssueComment.created_at",
    )

    __table_args__ = (
        Index("idx_issues_lat_lng", "lat", "lng"),
    )


class IssueTag(Base):
    """One tag on one issue; the composite key keeps tags unique per issue"""

    __tablename__ = "issue_tags"

    issue_id = Column(String(36), ForeignKey("issues.id", ondelete="CASCADE"), primary_key=True)
    tag = Column(String(100), primary_key=True, index=True)


class IssueVote(Base):
    """A user's single vote on an issue; direction is 'up' or 'down'"""

    __tablename__ = "issue_votes"

    issue_id = Column(String(36), ForeignKey("issues.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(String(36), primary_key=True)
    direction = Column(String(4), nullable=False)
    created_at = Column(DateTime, nullable=False)


class IssueComment(Base):
    """Comment thread entry, ordered by created_at"""

    __tablename__ = "issue_comments"

    id = Column(String(36), primary_key=True)
    issue_id = Column(String(36), ForeignKey("issues.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    created_by = Column(String(36), nullable=False)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)
