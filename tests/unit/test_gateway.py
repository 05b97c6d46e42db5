"""Unit tests for BackendGateway error mapping and payload parsing."""

import json

import httpx
import pytest
import pytest_check as check

from attrangi.config import ClientConfig
from attrangi.gateway.client import BackendGateway, parse_summary
from attrangi.gateway.errors import MalformedResponse, NetworkFailure
from attrangi.models.schemas import Phase, Profile, Role, SessionSummary, SupportStyle

SUMMARY = {
    "title": "Finding calm",
    "themes": ["work", "sleep"],
    "emotional_journey": "Tense, then lighter.",
    "key_insight": "Small breaks help.",
    "suggestions": ["Step outside at lunch."],
}


def make_gateway(handler, client_config: ClientConfig) -> BackendGateway:
    return BackendGateway(client_config, transport=httpx.MockTransport(handler))


class TestParseSummary:
    """Tests for summary payload interpretation."""

    def test_accepts_object(self) -> None:
        """A JSON object validates into SessionSummary."""
        summary = parse_summary(SUMMARY)

        check.is_instance(summary, SessionSummary)
        check.equal(summary.themes, ["work", "sleep"])

    def test_decodes_json_encoded_string(self) -> None:
        """A summary object sent as a JSON string is decoded."""
        assert parse_summary(json.dumps(SUMMARY)) == SessionSummary(**SUMMARY)

    def test_keeps_plain_text_report(self) -> None:
        """A preformatted report is returned as text."""
        assert parse_summary("  Session report:\n- calm  ") == "Session report:\n- calm"

    def test_broken_json_string_is_malformed(self) -> None:
        """A string that looks like JSON but does not parse is rejected."""
        with pytest.raises(MalformedResponse, match="not valid JSON"):
            parse_summary('{"title": ')

    def test_error_payload_is_malformed(self) -> None:
        """A backend error object is not a report."""
        with pytest.raises(MalformedResponse, match="could not summarize"):
            parse_summary({"error": "no conversation"})

    @pytest.mark.parametrize("payload", [None, 42, [], "", {"themes": []}])
    def test_unexpected_shapes_are_malformed(self, payload: object) -> None:
        """Anything else is rejected."""
        with pytest.raises(MalformedResponse):
            parse_summary(payload)


class TestRequests:
    """Tests for request construction and response decoding."""

    async def test_fetch_history_parses_messages(self, client_config: ClientConfig) -> None:
        """History is fetched from /history/{id} and parsed in order."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "conversation": [
                        {"role": "user", "content": "hi"},
                        {
                            "role": "assistant",
                            "content": "hello",
                            "blocks": [{"text": "hello", "phase": "immediate"}],
                        },
                    ]
                },
            )

        history = await make_gateway(handler, client_config).fetch_history("abc")

        check.equal(seen[0].method, "GET")
        check.equal(seen[0].url.path, "/history/abc")
        check.equal([m.role for m in history], [Role.USER, Role.ASSISTANT])
        check.equal(history[1].blocks[0].phase, Phase.IMMEDIATE)

    async def test_submit_profile_sends_wire_form(self, client_config: ClientConfig) -> None:
        """The profile body uses empty strings for unset fields."""
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={"status": "ok"})

        profile = Profile(topic_focus=["health"], support_style=SupportStyle.ANSWER_DIRECTLY)
        await make_gateway(handler, client_config).submit_profile("abc", profile)

        assert bodies == [
            {
                "session_id": "abc",
                "profile": {
                    "name": "",
                    "age_range": "",
                    "role": "",
                    "topic_focus": ["health"],
                    "support_style": "answer directly",
                },
            }
        ]

    async def test_exchange_returns_reply(self, client_config: ClientConfig) -> None:
        """A chat reply with blocks and expression is parsed."""

        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            return httpx.Response(
                200,
                json={
                    "reply": f"echo {body['message']}",
                    "blocks": [{"text": "echo", "phase": "deep"}],
                    "expression": "CURIOUS",
                },
            )

        reply = await make_gateway(handler, client_config).exchange("abc", "hi")

        check.equal(reply.reply, "echo hi")
        check.equal(reply.blocks[0].phase, Phase.DEEP)
        check.equal(reply.expression, "CURIOUS")


class TestErrors:
    """Tests for the failure taxonomy."""

    async def test_server_error_is_network_failure(self, client_config: ClientConfig) -> None:
        """Non-2xx responses raise NetworkFailure."""
        gateway = make_gateway(lambda request: httpx.Response(500), client_config)

        with pytest.raises(NetworkFailure, match="HTTP 500"):
            await gateway.exchange("abc", "hi")

    async def test_connection_error_is_network_failure(self, client_config: ClientConfig) -> None:
        """Transport errors raise NetworkFailure."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(NetworkFailure, match="failed"):
            await make_gateway(handler, client_config).fetch_history("abc")

    async def test_non_json_body_is_malformed(self, client_config: ClientConfig) -> None:
        """A success status with a non-JSON body raises MalformedResponse."""
        gateway = make_gateway(lambda request: httpx.Response(200, text="<html>"), client_config)

        with pytest.raises(MalformedResponse):
            await gateway.fetch_summary("abc")

    async def test_wrong_shape_is_malformed(self, client_config: ClientConfig) -> None:
        """A chat reply without a reply field raises MalformedResponse."""
        gateway = make_gateway(lambda request: httpx.Response(200, json={"text": "hi"}), client_config)

        with pytest.raises(MalformedResponse, match="unexpected shape"):
            await gateway.exchange("abc", "hi")

    async def test_history_with_bad_messages_is_malformed(self, client_config: ClientConfig) -> None:
        """History entries with unknown roles are rejected."""
        gateway = make_gateway(
            lambda request: httpx.Response(
                200, json={"conversation": [{"role": "system", "content": "x"}]}
            ),
            client_config,
        )

        with pytest.raises(MalformedResponse):
            await gateway.fetch_history("abc")
