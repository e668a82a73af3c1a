"""Review-related Pydantic schemas."""

from pydantic import BaseModel, Field, field_validator


class ReviewCreate(BaseModel):
    """Post-stay rating for a completed booking."""

    rating: float = Field(..., ge=0.5, le=5)

    @field_validator("rating")
    @classmethod
    def half_star_steps(cls, v: float) -> float:
        if (v * 2) != int(v * 2):
            raise ValueError("rating must be given in half-star steps")
        return v
