"""
services.traffic_service - Read side of imported traffic data.

Listing, dashboard totals, trend series and import history.  Filters are
built from an explicit TrafficFilter whose optional fields each add one
predicate; unset fields add nothing.

All session management is the caller's responsibility.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from db.models import Account, ImportBatch, TrafficRecord
from services.pagination import PageRequest, paginate

TREND_GROUPS = ("day", "week", "month")


@dataclass
class TrafficFilter:
    account_id: Optional[int] = None
    project_id: Optional[int] = None
    platform: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def criteria(self) -> list:
        crit = []
        if self.account_id is not None:
            crit.append(TrafficRecord.account_id == self.account_id)
        if self.project_id is not None:
            crit.append(TrafficRecord.account.has(Account.project_id == self.project_id))
        if self.platform:
            crit.append(TrafficRecord.account.has(Account.platform == self.platform))
        if self.start_date is not None:
            crit.append(TrafficRecord.publish_date >= self.start_date)
        if self.end_date is not None:
            crit.append(TrafficRecord.publish_date <= self.end_date)
        return crit


def _period_key(day: date, group_by: str) -> str:
    if group_by == "week":
        return (day - timedelta(days=day.weekday())).isoformat()
    if group_by == "month":
        return day.strftime("%Y-%m")
    return day.isoformat()


class TrafficService:

    @staticmethod
    def search(session: Session, filt: TrafficFilter, page: PageRequest) -> dict:
        """Paginated records, newest publish date first."""
        query = (
            session.query(TrafficRecord)
            .filter(*filt.criteria())
            .order_by(TrafficRecord.publish_date.desc(), TrafficRecord.id.desc())
        )
        return paginate(query, page)

    @staticmethod
    def dashboard(session: Session, filt: TrafficFilter) -> dict:
        row = (
            session.query(
                func.sum(TrafficRecord.views),
                func.sum(TrafficRecord.likes),
                func.sum(TrafficRecord.comments),
                func.sum(TrafficRecord.shares),
                func.sum(TrafficRecord.saves),
                func.avg(TrafficRecord.completion_rate),
                func.count(TrafficRecord.id),
            )
            .filter(*filt.criteria())
            .one()
        )
        views, likes, comments, shares, saves, avg_rate, count = row
        return {
            "totalViews": int(views or 0),
            "totalLikes": int(likes or 0),
            "totalComments": int(comments or 0),
            "totalShares": int(shares or 0),
            "totalSaves": int(saves or 0),
            "avgCompletionRate": round(float(avg_rate), 2) if avg_rate is not None else 0,
            "contentCount": int(count or 0),
        }

    @staticmethod
    def trend(session: Session, filt: TrafficFilter, group_by: str = "day") -> list[dict]:
        """
        Per-period sums in ascending order.  Records without a publish
        date have no place on the axis and are left out.
        """
        if group_by not in TREND_GROUPS:
            raise ValueError(f"groupBy must be one of {', '.join(TREND_GROUPS)}")

        rows = (
            session.query(
                TrafficRecord.publish_date,
                TrafficRecord.views,
                TrafficRecord.likes,
                TrafficRecord.comments,
                TrafficRecord.shares,
            )
            .filter(*filt.criteria())
            .filter(TrafficRecord.publish_date.isnot(None))
            .order_by(TrafficRecord.publish_date.asc())
            .all()
        )

        grouped: OrderedDict[str, dict] = OrderedDict()
        for day, views, likes, comments, shares in rows:
            key = _period_key(day, group_by)
            bucket = grouped.setdefault(
                key, {"date": key, "views": 0, "likes": 0, "comments": 0, "shares": 0},
            )
            bucket["views"] += views or 0
            bucket["likes"] += likes or 0
            bucket["comments"] += comments or 0
            bucket["shares"] += shares or 0
        return list(grouped.values())

    @staticmethod
    def import_records(session: Session, page: PageRequest) -> dict:
        query = (
            session.query(ImportBatch)
            .filter(ImportBatch.type == "traffic")
            .order_by(ImportBatch.created_at.desc(), ImportBatch.id.desc())
        )
        return paginate(query, page)
