"""
Base cleaner interface for all per-record cleaning stages.

Every stage inherits from BaseCleaner and implements clean(), which
returns a new StagedOrder rather than mutating the one it was given.
"""

from abc import ABC, abstractmethod

from order_etl.core.models import Defect, RejectionReason, StagedOrder
from order_etl.core.rules import CleaningPolicy


class CleaningError(Exception):
    """Raised when a field cannot be repaired and the order must be rejected."""

    def __init__(self, reason: RejectionReason, field_name: str, message: str):
        self.reason = reason
        self.field_name = field_name
        self.message = message
        super().__init__(f"[{reason.value}] {field_name}: {message}")

    def to_defect(self) -> Defect:
        return Defect(reason=self.reason, field_name=self.field_name, message=self.message)


class ConstraintViolation(CleaningError):
    """Raised by the constraint gate; carries every defect found on the order."""

    def __init__(self, order_id: int | None, defects: list[Defect]):
        if not defects:
            raise ValueError("ConstraintViolation requires at least one defect")
        self.order_id = order_id
        self.defects = list(defects)
        first = self.defects[0]
        super().__init__(
            first.reason,
            first.field_name,
            "; ".join(defect.message for defect in self.defects),
        )

    @property
    def reasons(self) -> list[RejectionReason]:
        return [defect.reason for defect in self.defects]

    @property
    def messages(self) -> list[str]:
        return [defect.message for defect in self.defects]


class StageError(Exception):
    """Raised when a stage fails with an error it does not map to a defect."""

    def __init__(self, stage_name: str, cause: Exception):
        self.stage_name = stage_name
        self.cause = cause
        super().__init__(f"{stage_name} stage failed: {type(cause).__name__}: {cause}")


class BaseCleaner(ABC):
    """
    Abstract base class for per-record cleaning stages.

    Each stage owns a subset of the order's fields, repairs what the
    policy allows and records a Defect for what it cannot repair.
    """

    def __init__(self, policy: CleaningPolicy | None = None):
        """
        Initialize cleaner.

        Args:
            policy: Repair policy (defaults to CleaningPolicy())
        """
        self.policy = policy or CleaningPolicy()

    @abstractmethod
    def clean(self, order: StagedOrder) -> StagedOrder:
        """
        Apply this stage to one staged order.

        Args:
            order: The order as left by the previous stage

        Returns:
            A new StagedOrder with this stage's fields resolved or a
            Defect recorded
        """
        pass

    @property
    @abstractmethod
    def stage_name(self) -> str:
        """Return the stage identifier."""
        pass
