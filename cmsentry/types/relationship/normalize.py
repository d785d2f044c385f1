from __future__ import annotations

from typing import Any
from typing import Dict
from typing import List

from cmsentry import commands
from cmsentry import exceptions
from cmsentry.components import Context
from cmsentry.types.datatype import Relationship


def _get_id(dtype: Relationship, value: Dict[str, Any]) -> Any:
    if 'id' not in value:
        raise exceptions.MissingRelationshipId(dtype, keys=sorted(value))
    return value['id']


@commands.normalize_relationships.register(Context, Relationship, list)
def normalize_relationships(context: Context, dtype: Relationship, value: List[Any]) -> List[Any]:
    return [
        _get_id(dtype, item) if isinstance(item, dict) else item
        for item in value
    ]


@commands.normalize_relationships.register(Context, Relationship, dict)
def normalize_relationships(context: Context, dtype: Relationship, value: Dict[str, Any]) -> Any:
    if not value:
        return value
    return _get_id(dtype, value)
