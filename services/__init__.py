"""
services - Business-logic layer sitting between API and DB.
"""

from services.account_service import AccountService, AccountFilter    # noqa: F401
from services.pagination import PageRequest, paginate                 # noqa: F401
from services.traffic_service import TrafficService, TrafficFilter    # noqa: F401
