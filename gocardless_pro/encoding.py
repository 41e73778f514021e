from __future__ import annotations

import json
import urllib.parse
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel

Params = Union[BaseModel, Mapping[str, Any], None]


def _is_empty(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, (str, list, tuple, dict)) and not value:
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value == 0:
        return True
    return False


def _as_dict(params: Params) -> Dict[str, Any]:
    if params is None:
        return {}
    if isinstance(params, BaseModel):
        return params.model_dump(mode="json", exclude_none=True)
    return dict(params)


def compact(params: Params) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, value in _as_dict(params).items():
        if isinstance(value, BaseModel) or isinstance(value, Mapping):
            value = compact(value)
        if _is_empty(value):
            continue
        out[key] = value
    return out


def _flatten(prefix: str, value: Any, pairs: List[Tuple[str, str]]) -> None:
    if isinstance(value, Mapping):
        for key, sub in value.items():
            _flatten(f"{prefix}[{key}]", sub, pairs)
    elif isinstance(value, (list, tuple)):
        for item in value:
            pairs.append((prefix, _scalar(item)))
    else:
        pairs.append((prefix, _scalar(value)))


def _scalar(value: Any) -> str:
    if value is True:
        return "true"
    return str(value)


def query_pairs(params: Params) -> List[Tuple[str, str]]:
    pairs: List[Tuple[str, str]] = []
    for key, value in compact(params).items():
        _flatten(key, value, pairs)
    return pairs


def encode_query(params: Params) -> str:
    return urllib.parse.urlencode(query_pairs(params))


def encode_body(key: str, params: Params) -> bytes:
    return json.dumps({key: compact(params)}).encode("utf-8")


def merge_params(params: Params, **overrides: Optional[Any]) -> Dict[str, Any]:
    merged = _as_dict(params)
    for key, value in overrides.items():
        if value is None:
            merged.pop(key, None)
        else:
            merged[key] = value
    return merged
