"""
Outcomes of mount/dismount transitions.
"""
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field

from gym_catalog.schemas.catalog import RouteState


class TransitionOutcome(BaseModel):
    """
    Result of one route transition.

    `changed` is False when the route was already in the target state
    (a successful no-op).
    """
    model_config = ConfigDict(frozen=True)

    route_id: int
    ok: bool
    state: Optional[RouteState] = None
    changed: bool = False
    errors: Dict[str, List[str]] = Field(default_factory=dict)


class BatchTransitionResult(BaseModel):
    """Per-item outcomes of a best-effort batch, in request order."""
    model_config = ConfigDict(frozen=True)

    action: str
    outcomes: Tuple[TransitionOutcome, ...] = ()

    @computed_field
    @property
    def succeeded(self) -> List[int]:
        return [outcome.route_id for outcome in self.outcomes if outcome.ok]

    @computed_field
    @property
    def failed(self) -> List[int]:
        return [outcome.route_id for outcome in self.outcomes if not outcome.ok]


class RouteIdsRequest(BaseModel):
    """Body of the collection mount/dismount endpoints."""
    route_ids: List[int] = Field(..., min_length=1, description="Gym route IDs")
