from pydantic import BaseModel, field_validator

from extraction import FinishReason


class ParseRequest(BaseModel):
    text: str
    finish_reason: FinishReason = FinishReason.stop

    @field_validator("finish_reason", mode="before")
    @classmethod
    def coerce_finish_reason(cls, value):
        # provider spellings like "max_tokens" and unknown reasons are not client errors
        return FinishReason.coerce(value)


class DocumentRequest(BaseModel):
    source: str
    model: str | None = None
    pages_per_request: int | None = None
    max_retries: int = 1
    write_exports: bool = True
