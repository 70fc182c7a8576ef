"""
import_engine.field_map - Column-header → canonical-field mapping.

Platform exports name their columns inconsistently (localised, with unit
notes in parentheses, English or Chinese).  Each canonical field lists the
substrings that identify it; a header matches when its lowercased, trimmed
text contains one of them.

No candidate of one field is a substring of another field's candidate, so a
canonical header can never resolve two different fields.
"""

from __future__ import annotations

from typing import Optional, Sequence

from db.models import Platform

# canonical field  →  candidate substrings, in priority order
FIELD_CANDIDATES: dict[str, list[str]] = {
    "account_name":    ["账号名称", "账号", "昵称", "account"],
    "platform":        ["平台", "渠道", "platform"],
    "remark":          ["备注", "remark", "note"],
    "content_title":   ["标题", "作品名称", "title"],
    "content_type":    ["内容类型", "作品类型", "体裁", "type"],
    "content_url":     ["链接", "url", "link"],
    "publish_time":    ["发布时间", "发布日期", "发表时间", "publish", "posted"],
    "views":           ["阅读", "播放", "浏览", "观看", "views", "plays", "reads"],
    "likes":           ["点赞", "likes", "like"],
    "comments":        ["评论", "comment"],
    "shares":          ["分享", "转发", "share"],
    "saves":           ["收藏", "save", "collect"],
    "recommends":      ["推荐", "recommend"],
    "completion_rate": ["完播率", "completion"],
}

REQUIRED_FIELDS = ("account_name", "platform")

# Display label (as exported by the platforms / typed by operators) → enum
PLATFORM_LABELS: dict[str, Platform] = {
    "抖音":       Platform.DOUYIN,
    "快手":       Platform.KUAISHOU,
    "小红书":     Platform.XIAOHONGSHU,
    "视频号":     Platform.SHIPINHAO,
    "微信视频号": Platform.SHIPINHAO,
}
PLATFORM_LABELS.update({p.value: p for p in Platform})


def find_column(headers: Sequence[str], candidates: Sequence[str]) -> Optional[int]:
    """
    Index of the first header containing any candidate, or None.

    Candidates are tried in order; for each one the headers are scanned
    left to right, so an earlier candidate beats an earlier column.
    """
    normalised = [(h or "").strip().lower() for h in headers]
    for cand in candidates:
        needle = cand.lower()
        for idx, header in enumerate(normalised):
            if header and needle in header:
                return idx
    return None


def resolve_headers(headers: Sequence[str]) -> dict[str, int]:
    """Map every canonical field present in *headers* to its column index."""
    columns: dict[str, int] = {}
    for field, candidates in FIELD_CANDIDATES.items():
        idx = find_column(headers, candidates)
        if idx is not None:
            columns[field] = idx
    return columns


def platform_from_label(label: str) -> Optional[Platform]:
    """Translate a platform label to its enum member, or None if unknown."""
    key = (label or "").strip()
    return PLATFORM_LABELS.get(key) or PLATFORM_LABELS.get(key.lower())
