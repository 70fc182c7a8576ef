"""
services.account_service - Account CRUD, lookup and filtered listing.

Session management is the caller's responsibility: create / update /
delete flush but never commit.  Invalid input raises ValueError.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from db.models import Account, Platform, Project
from services.pagination import PageRequest, paginate

_PLATFORMS = {p.value for p in Platform}

# JSON key → column for fields a client may set directly.
_TEXT_FIELDS = {"accountName": "account_name", "accountId": "account_id", "remark": "remark"}
_INT_FIELDS = {"followers": "followers", "status": "status"}


@dataclass
class AccountFilter:
    project_id: Optional[int] = None
    platform: Optional[str] = None
    keyword: str = ""
    status: Optional[int] = None

    def criteria(self) -> list:
        crit = []
        if self.project_id is not None:
            crit.append(Account.project_id == self.project_id)
        if self.platform:
            crit.append(Account.platform == self.platform)
        if self.status is not None:
            crit.append(Account.status == self.status)
        if self.keyword:
            like = f"%{self.keyword}%"
            crit.append(or_(Account.account_name.ilike(like), Account.account_id.ilike(like)))
        return crit


class AccountService:

    @staticmethod
    def search(session: Session, filt: AccountFilter, page: PageRequest) -> dict:
        query = (
            session.query(Account)
            .filter(*filt.criteria())
            .order_by(Account.created_at.desc(), Account.id.desc())
        )
        return paginate(query, page)

    @staticmethod
    def get(session: Session, account_id: int) -> Account | None:
        return session.get(Account, account_id)

    @staticmethod
    def project_exists(session: Session, project_id: int) -> bool:
        return session.get(Project, project_id) is not None

    # ── Create / update / delete ───────────────────────────────────────

    @staticmethod
    def create(session: Session, data: dict) -> Account:
        """
        Create an account from a camelCase dict.
        Required keys: platform, accountName.
        """
        if not str(data.get("platform") or "").strip():
            raise ValueError("platform is required")
        if not str(data.get("accountName") or "").strip():
            raise ValueError("accountName is required")

        account = Account(followers=0, status=1)
        AccountService._apply(session, account, data)
        session.add(account)
        session.flush()
        return account

    @staticmethod
    def update(session: Session, account: Account, data: dict) -> Account:
        """Update only the keys present in *data*."""
        AccountService._apply(session, account, data)
        session.flush()
        return account

    @staticmethod
    def delete(session: Session, account: Account) -> None:
        """Delete the account; its traffic records go with it."""
        session.delete(account)
        session.flush()

    @staticmethod
    def _apply(session: Session, account: Account, data: dict) -> None:
        if "platform" in data:
            platform = str(data["platform"] or "").strip()
            if platform not in _PLATFORMS:
                raise ValueError(f"unknown platform: {platform}")
            account.platform = platform

        for key, attr in _TEXT_FIELDS.items():
            if key in data:
                val = str(data[key] or "").strip()
                if attr == "account_name" and not val:
                    raise ValueError("accountName must not be blank")
                setattr(account, attr, val or None)

        for key, attr in _INT_FIELDS.items():
            if key in data:
                val = _as_int(data[key], key)
                if val is None or val < 0:
                    raise ValueError(f"{key} must be a non-negative integer")
                setattr(account, attr, val)

        if "projectId" in data:
            project_id = _as_int(data["projectId"], "projectId")
            if project_id is not None and not AccountService.project_exists(session, project_id):
                raise ValueError(f"project {project_id} not found")
            account.project_id = project_id


def _as_int(value, key: str) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError(f"{key} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{key} must be an integer") from None
