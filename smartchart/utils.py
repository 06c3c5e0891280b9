"""
Utility functions shared by the layout builders and the HTTP layer.
"""

import hashlib
import json
import logging
from datetime import date, datetime
from typing import Any

import numpy as np
import pandas as pd

# Configure logging
logger = logging.getLogger(__name__)


def convert_numpy_types(obj: Any) -> Any:
    """Recursively convert numpy / pandas values to JSON-friendly Python types."""
    if isinstance(obj, (bool, np.bool_)):
        return bool(obj)
    elif isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating):
        value = float(obj)
        return value if np.isfinite(value) else None
    elif isinstance(obj, float):
        return obj if np.isfinite(obj) else None
    elif isinstance(obj, pd.Timestamp):
        return None if pd.isna(obj) else obj.isoformat()
    elif isinstance(obj, (datetime, date)):
        return obj.isoformat()
    elif isinstance(obj, np.datetime64):
        return None if np.isnat(obj) else str(obj)
    elif isinstance(obj, np.ndarray):
        return [convert_numpy_types(item) for item in obj.tolist()]
    elif isinstance(obj, dict):
        return {key: convert_numpy_types(value) for key, value in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [convert_numpy_types(item) for item in obj]
    else:
        return obj


def payload_hash(payload: Any) -> str:
    """Stable md5 of a JSON-serializable payload, used as a memo key."""
    canonical = json.dumps(convert_numpy_types(payload), sort_keys=True, default=str, ensure_ascii=False)
    return hashlib.md5(canonical.encode('utf-8')).hexdigest()
