import math
from typing import Any, Dict, Tuple, Union

def validate_record(record: Any, expected_schema: Dict[str, Union[type, Tuple[type, ...]]]) -> bool:
    """True when record is a dict holding every schema key with a value of the expected type.

    Bools never pass as numbers, and non-finite floats never pass at all.
    """
    if not isinstance(record, dict):
        return False
    for key, expected_type in expected_schema.items():
        if key not in record:
            return False
        value = record[key]
        if isinstance(value, bool) and bool not in _as_tuple(expected_type):
            return False
        if isinstance(value, float) and not math.isfinite(value):
            return False
        if not isinstance(value, expected_type):
            return False
    return True

def _as_tuple(expected_type):
    return expected_type if isinstance(expected_type, tuple) else (expected_type,)
