from datetime import datetime
from pydantic import BaseModel, model_validator
from typing import Optional


class ValidityWindow(BaseModel):
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None

    @model_validator(mode="after")
    def check_window_order(self):
        if self.valid_from is None or self.valid_until is None:
            return self
        if (self.valid_from.tzinfo is None) != (self.valid_until.tzinfo is None):
            raise ValueError("valid_from and valid_until must both be timezone-aware or both naive")
        if self.valid_from >= self.valid_until:
            raise ValueError("valid_from must be earlier than valid_until")
        return self
