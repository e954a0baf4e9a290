from __future__ import annotations

import logging
from typing import Dict, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import MongoClient

from utils import get_env

logger = logging.getLogger(__name__)

# ================= Config =================
MONGO_URI = get_env("MONGO_URI", "mongodb://localhost:27017")
MONGO_DB = get_env("MONGO_DB", "webaudit")
REPORTS_COLLECTION = get_env("REPORTS_COLLECTION", "reports")


class NotFoundError(LookupError):
    """Requested report does not exist."""


class ReportStore:
    """Read-only access to audit reports written by the scanner."""

    def __init__(self, collection):
        self.collection = collection

    @classmethod
    def from_env(cls) -> "ReportStore":
        client = MongoClient(MONGO_URI)
        logger.info("Report store: %s/%s", MONGO_DB, REPORTS_COLLECTION)
        return cls(client[MONGO_DB][REPORTS_COLLECTION])

    def find_by_id(self, report_id: str) -> Optional[Dict]:
        # ObjectId(None) would mint a fresh id
        if not report_id:
            return None
        try:
            oid = ObjectId(report_id)
        except (InvalidId, TypeError):
            logger.debug("Not an ObjectId: %r", report_id)
            return None
        return self.collection.find_one({"_id": oid})
