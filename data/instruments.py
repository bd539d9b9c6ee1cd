"""
Sampling instrument registry.

Keeps the isokinetic samplers a team owns (model name and maximum flow
rate) so the nozzle calculator can be driven by picking an instrument.
The registry serialises to JSON for whichever store the caller uses.
"""

import json
import logging
import math
import uuid
from dataclasses import asdict, dataclass, replace
from datetime import datetime, timezone
from typing import Dict, List, Optional

from models.errors import CalculationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Instrument:
    """A flue-gas sampler.

    Args:
        id: Unique identifier.
        model: Model name as shown to the user.
        max_flow_rate: Maximum sampling flow rate (L/min).
        created_at: ISO-8601 creation timestamp.
    """

    id: str
    model: str
    max_flow_rate: float
    created_at: str

    def __post_init__(self):
        if not isinstance(self.model, str) or not self.model.strip():
            raise CalculationError("Instrument model is required.")
        try:
            flow = float(self.max_flow_rate)
        except (TypeError, ValueError):
            raise CalculationError(f"Maximum flow rate is not a number: {self.max_flow_rate!r}.")
        # frozen dataclass: store the coerced value directly
        object.__setattr__(self, "max_flow_rate", flow)
        if not (flow > 0 and math.isfinite(flow)):
            raise CalculationError("Maximum flow rate must be greater than 0 L/min.")


class InstrumentRegistry:
    """In-memory collection of instruments, insertion ordered."""

    def __init__(self, instruments: Optional[List[Instrument]] = None):
        self._instruments: Dict[str, Instrument] = {}
        for inst in instruments or []:
            self._instruments[inst.id] = inst

    def __len__(self) -> int:
        return len(self._instruments)

    def add(self, model: str, max_flow_rate: float) -> Instrument:
        inst = Instrument(
            id=str(uuid.uuid4()),
            model=model.strip(),
            max_flow_rate=float(max_flow_rate),
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        self._instruments[inst.id] = inst
        logger.info("Added instrument %s (%s, %.1f L/min)", inst.id, inst.model, inst.max_flow_rate)
        return inst

    def update(self, instrument_id: str, model: Optional[str] = None,
               max_flow_rate: Optional[float] = None) -> Instrument:
        current = self.get(instrument_id)
        changes = {}
        if model is not None:
            changes["model"] = model.strip()
        if max_flow_rate is not None:
            changes["max_flow_rate"] = float(max_flow_rate)
        updated = replace(current, **changes)
        self._instruments[instrument_id] = updated
        return updated

    def remove(self, instrument_id: str) -> None:
        self.get(instrument_id)
        del self._instruments[instrument_id]

    def get(self, instrument_id: str) -> Instrument:
        try:
            return self._instruments[instrument_id]
        except KeyError:
            raise CalculationError(f"Selected instrument does not exist: {instrument_id}")

    def instruments(self) -> List[Instrument]:
        return list(self._instruments.values())

    def to_json(self) -> str:
        return json.dumps([asdict(i) for i in self._instruments.values()], indent=2)

    @classmethod
    def from_json(cls, text: str) -> "InstrumentRegistry":
        if not text or not text.strip():
            return cls()
        records = json.loads(text)
        return cls([Instrument(**record) for record in records])
