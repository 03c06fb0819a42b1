from dataclasses import dataclass
from typing import Any, Callable, Optional

from gymadmin.domain.errors import GymAdminError


@dataclass(frozen=True)
class Outcome:
    """Result of a core operation: either a value or a typed failure"""

    ok: bool
    value: Any = None
    error: Optional[GymAdminError] = None

    @property
    def error_code(self) -> Optional[str]:
        return self.error.code if self.error else None

    @property
    def message(self) -> Optional[str]:
        return self.error.message if self.error else None


def attempt(fn: Callable, *args, **kwargs) -> Outcome:
    """Run a core operation and return its failure instead of raising it."""
    try:
        return Outcome(ok=True, value=fn(*args, **kwargs))
    except GymAdminError as e:
        return Outcome(ok=False, error=e)
