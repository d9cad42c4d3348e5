from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field as PydanticField


class ReviewCreate(BaseModel):
    id_user: int = PydanticField(..., gt=0)
    rating: int = PydanticField(..., ge=1, le=5)
    comment: Optional[str] = PydanticField(None, max_length=2000)


class ReviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id_review: int
    id_field: int
    id_user: int
    rating: int
    comment: Optional[str] = None
    created_at: Optional[datetime] = None
