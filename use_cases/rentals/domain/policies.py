"""
Return Policies - Pure Business Rules.

These policies encapsulate the business rules for rental returns.
They have NO dependencies on databases or external services.
All data needed for evaluation is passed in as parameters.
"""

import re
from typing import Any, Dict, List, Optional, Pattern

from core.domain import Validator, ValidationError


# =============================================================================
# CONFIGURATION
# =============================================================================

# Same format as a MongoDB ObjectId: 24 hex characters
DEFAULT_IDENTIFIER_PATTERN = r"^[0-9a-fA-F]{24}$"

# Copies credited back to stock for each returned rental
RETURN_STOCK_DELTA = 1


# =============================================================================
# VALIDATORS
# =============================================================================

class ReturnRequestValidator(Validator):
    """
    Validates a return command before any lookup happens.

    Errors come back in field order, customerId before movieId.
    """

    REQUIRED_FIELDS = [
        "customerId",
        "movieId",
    ]

    def __init__(self, identifier_pattern: Optional[str] = None):
        self._pattern: Pattern[str] = re.compile(
            identifier_pattern or DEFAULT_IDENTIFIER_PATTERN
        )

    def is_identifier(self, value: Any) -> bool:
        return isinstance(value, str) and self._pattern.fullmatch(value) is not None

    def validate(self, data: Dict[str, Any]) -> List[ValidationError]:
        errors = []

        for field in self.REQUIRED_FIELDS:
            value = data.get(field)
            if value is None or value == "":
                errors.append(ValidationError(
                    field=field,
                    message=f"{field} is required",
                    code="required",
                ))
            elif not self.is_identifier(value):
                errors.append(ValidationError(
                    field=field,
                    message=f"{field} is not a valid identifier",
                    code="invalid_format",
                ))

        return errors
