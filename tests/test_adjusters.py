import pytest

from providers import adjusters
from providers.adjusters import GROQ_BASE_URL, adjust_request, find_adjuster, register_adjuster
from providers.schema import ChatRequest


def _groq_req():
    return ChatRequest(
        model="llama-3.1-8b-instant",
        messages=[
            {"role": "system", "content": "be brief"},
            {"role": "user", "content": "hi", "name": "alice"},
        ],
        n=3,
        logprobs=True,
        top_logprobs=2,
        logit_bias={"50256": -100},
        temperature=0.2,
    )


def test_groq_request_is_adjusted():
    req = _groq_req()
    out = adjust_request(GROQ_BASE_URL, req)

    assert out is req
    assert req.n == 1
    assert req.logprobs is None
    assert req.top_logprobs is None
    assert req.logit_bias is None
    assert all("name" not in m for m in req.messages)
    assert req.temperature == 0.2

    kwargs = req.to_create_kwargs()
    assert "logprobs" not in kwargs
    assert "logit_bias" not in kwargs


def test_other_urls_pass_through():
    req = _groq_req()
    before = req.model_dump()
    adjust_request("https://api.openai.com/v1", req)
    assert req.model_dump() == before


def test_prefix_match_is_exact():
    assert find_adjuster("https://api.groq.com/openai/v1") is not None
    assert find_adjuster("http://api.groq.com/openai/v1") is None
    assert find_adjuster("https://api.groq.com/v1") is None


@pytest.fixture()
def restore_registry():
    saved = list(adjusters.ADJUSTERS)
    yield
    adjusters.ADJUSTERS[:] = saved


def test_registering_a_new_vendor(restore_registry):
    @register_adjuster("https://vendor.example.com/v1")
    def drop_seed(req):
        req.seed = None

    req = ChatRequest(model="m", seed=7)
    adjust_request("https://vendor.example.com/v1", req)
    assert req.seed is None
