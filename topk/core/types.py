# topk/core/types.py
from __future__ import annotations

from dataclasses import dataclass, asdict, field
from enum import Enum
from typing import Any, Dict, List, Optional


class RunStatus(str, Enum):
    OK = "ok"
    MISMATCH = "mismatch"
    TIMEOUT = "timeout"
    EXCEPTION = "exception"


DISTRIBUTIONS = ("uniform", "integers", "sorted", "reversed")


@dataclass(frozen=True)
class ScenarioSpec:
    """
    Un escenario del benchmark: flujo de n valores con capacidad k.
    """
    scenario_id: str
    k: int
    n: int
    distribution: str = "uniform"
    seed: int = 0

    def __post_init__(self) -> None:
        if self.distribution not in DISTRIBUTIONS:
            raise ValueError(f"Distribución desconocida: {self.distribution!r}")
        if self.n < 0:
            raise ValueError(f"n debe ser >= 0, recibido {self.n}")


@dataclass
class BenchmarkResult:
    """
    Resultado estándar de ejecutar un escenario sobre TopKQueue.
    """
    scenario_id: str
    k: int
    n: int
    distribution: str
    seed: int
    status: RunStatus

    start_time: str
    end_time: str
    wall_time_sec: float

    # Métricas del escenario
    pushes_per_sec: Optional[float] = None
    top: Optional[List[Any]] = None                 # valores retenidos, de mayor a menor

    meta: Dict[str, Any] = field(default_factory=dict)

    # Info de error (si aplica)
    exception_type: Optional[str] = None
    exception_message: Optional[str] = None
    exception_traceback: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serializable a JSON fácilmente."""
        return asdict(self)
