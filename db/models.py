"""
db.models - SQLAlchemy ORM declarations.

Tables
------
projects         - owning project of an account.  Only the columns the
                   traffic slice reads are declared here.
accounts         - one row per social-platform account.  Looked up by
                   (platform, account_name) during imports.
traffic_records  - one row per imported content item with its counters.
                   import_batch is a plain back-reference to the batch
                   number, not a foreign key.
import_batches   - one summary row per import invocation.  Written once,
                   never updated.
"""

from __future__ import annotations

import enum
from datetime import datetime, timezone

from sqlalchemy import (
    Column, String, Integer, Float, Date, DateTime, Text, ForeignKey, Index,
)
from sqlalchemy.orm import DeclarativeBase, relationship


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _iso(value) -> str | None:
    return value.isoformat() if value else None


class Platform(str, enum.Enum):
    DOUYIN      = "douyin"
    KUAISHOU    = "kuaishou"
    XIAOHONGSHU = "xiaohongshu"
    SHIPINHAO   = "shipinhao"


class Base(DeclarativeBase):
    pass


class Project(Base):
    __tablename__ = "projects"

    id         = Column(Integer, primary_key=True, autoincrement=True)
    name       = Column(String(200), nullable=False)
    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    accounts = relationship("Account", back_populates="project")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "createdAt": _iso(self.created_at),
        }


class Account(Base):
    __tablename__ = "accounts"

    id           = Column(Integer, primary_key=True, autoincrement=True)
    project_id   = Column(Integer, ForeignKey("projects.id", ondelete="SET NULL"),
                          nullable=True, index=True)
    platform     = Column(String(20), nullable=False)
    account_name = Column(String(200), nullable=False)
    account_id   = Column(String(200), nullable=True)    # platform-side handle
    followers    = Column(Integer, nullable=False, default=0)
    remark       = Column(Text, nullable=True)
    status       = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    project = relationship("Project", back_populates="accounts", lazy="joined")
    traffic = relationship(
        "TrafficRecord", back_populates="account",
        cascade="all, delete-orphan", passive_deletes=True,
    )

    # Not unique: imports look up before creating, see DESIGN.md.
    __table_args__ = (
        Index("ix_account_platform_name", "platform", "account_name"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "projectId": self.project_id,
            "projectName": self.project.name if self.project else None,
            "platform": self.platform,
            "accountName": self.account_name,
            "accountId": self.account_id,
            "followers": self.followers or 0,
            "remark": self.remark,
            "status": self.status,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


class TrafficRecord(Base):
    __tablename__ = "traffic_records"

    id         = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"),
                        nullable=False, index=True)

    # ── Content ────────────────────────────────────────────────────────
    content_title = Column(Text, nullable=True)
    content_type  = Column(String(50), nullable=True)
    content_url   = Column(Text, nullable=True)
    publish_date  = Column(Date, nullable=True, index=True)
    published_at  = Column(DateTime, nullable=True)

    # ── Counters ───────────────────────────────────────────────────────
    views    = Column(Integer, nullable=False, default=0)
    likes    = Column(Integer, nullable=False, default=0)
    comments = Column(Integer, nullable=False, default=0)
    shares   = Column(Integer, nullable=False, default=0)
    saves    = Column(Integer, nullable=False, default=0)
    recommends      = Column(Integer, nullable=True)      # None = not reported
    completion_rate = Column(Float, nullable=True)

    import_batch = Column(String(40), nullable=True, index=True)
    created_at   = Column(DateTime, default=_utcnow)

    account = relationship("Account", back_populates="traffic", lazy="joined")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "accountId": self.account_id,
            "accountName": self.account.account_name if self.account else None,
            "platform": self.account.platform if self.account else None,
            "contentTitle": self.content_title,
            "contentType": self.content_type,
            "contentUrl": self.content_url,
            "publishDate": _iso(self.publish_date),
            "publishedAt": _iso(self.published_at),
            "views": self.views,
            "likes": self.likes,
            "comments": self.comments,
            "shares": self.shares,
            "saves": self.saves,
            "recommends": self.recommends,
            "completionRate": self.completion_rate,
            "importBatch": self.import_batch,
            "createdAt": _iso(self.created_at),
        }


class ImportBatch(Base):
    __tablename__ = "import_batches"

    id           = Column(Integer, primary_key=True, autoincrement=True)
    type         = Column(String(20), nullable=False, default="traffic", index=True)
    batch_no     = Column(String(40), nullable=False, index=True)
    file_name    = Column(String(300), nullable=True)
    total_rows   = Column(Integer, nullable=False, default=0)
    success_rows = Column(Integer, nullable=False, default=0)
    failed_rows  = Column(Integer, nullable=False, default=0)
    status       = Column(String(20), nullable=False, default="completed")
    error_log    = Column(Text, nullable=True)
    created_by   = Column(Integer, nullable=True)     # user id from the auth layer
    created_at   = Column(DateTime, default=_utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "batchNo": self.batch_no,
            "fileName": self.file_name,
            "totalRows": self.total_rows,
            "successRows": self.success_rows,
            "failedRows": self.failed_rows,
            "status": self.status,
            "createdBy": self.created_by,
            "createdAt": _iso(self.created_at),
        }
