# providers/schema.py
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ChatRequest(BaseModel):
    """
    Canonical chat-completion request (OpenAI shape). Fields the gateway does
    not know about are kept and forwarded as-is.
    """
    model_config = ConfigDict(extra="allow")

    model: str
    messages: List[Dict[str, Any]] = Field(default_factory=list)
    stream: bool = False

    temperature: Optional[float] = None
    top_p: Optional[float] = None
    n: Optional[int] = None
    max_tokens: Optional[int] = None
    stop: Optional[Union[str, List[str]]] = None
    presence_penalty: Optional[float] = None
    frequency_penalty: Optional[float] = None
    logit_bias: Optional[Dict[str, float]] = None
    logprobs: Optional[bool] = None
    top_logprobs: Optional[int] = None
    user: Optional[str] = None
    tools: Optional[List[Dict[str, Any]]] = None
    tool_choice: Optional[Union[str, Dict[str, Any]]] = None
    response_format: Optional[Dict[str, Any]] = None
    seed: Optional[int] = None

    def to_create_kwargs(self) -> Dict[str, Any]:
        """kwargs for client.chat.completions.create (stream is passed separately)."""
        extra = dict(self.model_extra or {})
        kwargs = self.model_dump(exclude_none=True, exclude=set(extra) | {"stream"})
        extra = {k: v for k, v in extra.items() if v is not None}
        if extra:
            # the sdk rejects unknown kwargs, unknown fields ride in the body
            kwargs["extra_body"] = extra
        return kwargs
