"""Policy endpoints: /api/v1/policy."""

from __future__ import annotations

from fastapi import APIRouter, Response

from evidence_governance.api.deps import PolicyEngineDep
from evidence_governance.api.schemas import (
    EvaluatePolicyRequest,
    PolicyConditionsResponse,
    PolicyDecisionResponse,
    PolicyResponse,
)

router = APIRouter(prefix="/api/v1/policy", tags=["policy"])


@router.post(
    "/evaluate",
    responses={403: {"model": PolicyDecisionResponse, "description": "Access denied by a policy"}},
)
async def evaluate_policy(
    body: EvaluatePolicyRequest,
    engine: PolicyEngineDep,
    response: Response,
) -> PolicyDecisionResponse:
    decision = await engine.evaluate_policy(body.user, body.resource, body.action, body.context)
    if not decision.allowed:
        response.status_code = 403
    return PolicyDecisionResponse(allowed=decision.allowed, reason=decision.reason, policy=decision.policy)


@router.get("/policies")
async def list_policies(engine: PolicyEngineDep) -> list[PolicyResponse]:
    return [
        PolicyResponse(
            id=policy.id,
            name=policy.name,
            rules=[type(rule).__name__ for rule in policy.rules],
            conditions=PolicyConditionsResponse.model_validate(policy.conditions.model_dump()),
        )
        for policy in engine.get_policies()
    ]
