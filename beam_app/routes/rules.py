"""Rules registry route."""

from typing import List

from fastapi import APIRouter

from beam_checker.rules import RULES

from ..schemas import RuleOut

router = APIRouter()


@router.get("/rules", response_model=List[RuleOut])
def list_rules() -> List[RuleOut]:
    """Every rule the checker can report, with its default severity."""
    return [
        RuleOut(rule_id=r.rule_id, severity=r.severity.value, description=r.description)
        for r in RULES.values()
    ]
