"""
Closed schema for the ``EmailWorkflow.conditions`` column.

Workflows are stored with ``{}`` today and the matcher does not evaluate
conditions yet, but anything written to the column has to parse into one of
the node types below so future predicates never meet free-form data.

    {"all": [
        {"type": "equals", "field": "membership_type", "value": "Adult"},
        {"type": "in", "field": "membership_type", "values": ["Adult", "Family"]},
        {"type": "date_range", "field": "joined_at", "start": "2024-01-01", "end": null}
    ]}
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Tuple, Union

from .exceptions import WorkflowValidationError


@dataclass(frozen=True)
class Equals:
    field: str
    value: str

    def to_dict(self):
        return {'type': 'equals', 'field': self.field, 'value': self.value}


@dataclass(frozen=True)
class InSet:
    field: str
    values: Tuple[str, ...]

    def to_dict(self):
        return {'type': 'in', 'field': self.field, 'values': list(self.values)}


@dataclass(frozen=True)
class DateRange:
    field: str
    start: Optional[date] = None
    end: Optional[date] = None

    def to_dict(self):
        return {
            'type': 'date_range',
            'field': self.field,
            'start': self.start.isoformat() if self.start else None,
            'end': self.end.isoformat() if self.end else None,
        }


Condition = Union[Equals, InSet, DateRange]


@dataclass(frozen=True)
class ConditionSet:
    all: Tuple[Condition, ...] = field(default_factory=tuple)

    def is_empty(self) -> bool:
        return not self.all

    def to_dict(self) -> Dict[str, Any]:
        if self.is_empty():
            return {}
        return {'all': [node.to_dict() for node in self.all]}


def _require_str(node: Dict[str, Any], key: str, index: int) -> str:
    value = node.get(key)
    if not isinstance(value, str) or not value:
        raise WorkflowValidationError({'conditions': [f"Condition {index}: '{key}' must be a non-empty string"]})
    return value


def _parse_date(node: Dict[str, Any], key: str, index: int) -> Optional[date]:
    value = node.get(key)
    if value in (None, ''):
        return None
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        raise WorkflowValidationError({'conditions': [f"Condition {index}: '{key}' must be an ISO date"]})


def _parse_node(node: Any, index: int) -> Condition:
    if not isinstance(node, dict):
        raise WorkflowValidationError({'conditions': [f"Condition {index} must be an object"]})

    kind = node.get('type')
    if kind == 'equals':
        return Equals(field=_require_str(node, 'field', index), value=str(node.get('value', '')))
    if kind == 'in':
        values = node.get('values')
        if not isinstance(values, list) or not values:
            raise WorkflowValidationError({'conditions': [f"Condition {index}: 'values' must be a non-empty list"]})
        return InSet(field=_require_str(node, 'field', index), values=tuple(str(v) for v in values))
    if kind == 'date_range':
        start = _parse_date(node, 'start', index)
        end = _parse_date(node, 'end', index)
        if start and end and start > end:
            raise WorkflowValidationError({'conditions': [f"Condition {index}: 'start' is after 'end'"]})
        return DateRange(field=_require_str(node, 'field', index), start=start, end=end)

    raise WorkflowValidationError({'conditions': [f"Condition {index}: unknown type {kind!r}"]})


def parse_conditions(data: Any) -> ConditionSet:
    """Validate a stored conditions blob. ``None`` and ``{}`` mean no conditions."""
    if data in (None, {}):
        return ConditionSet()
    if not isinstance(data, dict) or set(data) != {'all'}:
        raise WorkflowValidationError({'conditions': ["Conditions must be empty or an object with a single 'all' list"]})

    nodes: List[Any] = data['all']
    if not isinstance(nodes, list):
        raise WorkflowValidationError({'conditions': ["'all' must be a list"]})
    return ConditionSet(all=tuple(_parse_node(node, i) for i, node in enumerate(nodes)))
