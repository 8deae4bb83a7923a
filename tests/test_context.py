"""Tests for context builders — tagged results and their effect on dispatch."""

import pytest

from protoroute.http.request import Request
from protoroute.http.response import Response
from protoroute.routing.context import Context, Failure, ShortCircuit, build_context
from protoroute.routing.router import Router

pytestmark = pytest.mark.anyio


def _get(url: str = "app://user/42") -> Request:
    return Request.create("GET", url)


class TestBuildContext:
    async def test_plain_value_is_wrapped(self) -> None:
        result = await build_context(lambda request: {"user": "ada"}, _get())
        assert result == Context({"user": "ada"})

    async def test_async_builder_awaited(self) -> None:
        async def builder(request):
            return request.method

        assert await build_context(builder, _get()) == Context("GET")

    async def test_none_is_a_context_value(self) -> None:
        assert await build_context(lambda request: None, _get()) == Context(None)

    async def test_exception_becomes_failure(self) -> None:
        error = LookupError("no session")

        def builder(request):
            raise error

        result = await build_context(builder, _get())
        assert isinstance(result, Failure)
        assert result.error is error

    async def test_tagged_results_pass_through(self) -> None:
        short = ShortCircuit(Response("Unauthorized", status=401))
        failure = Failure("expired")

        assert await build_context(lambda request: short, _get()) is short
        assert await build_context(lambda request: failure, _get()) is failure


class TestDispatchWithContext:
    async def test_context_passed_as_second_argument(self) -> None:
        def show(target, user):
            return f"{user} views {target.params['id']}"

        router = Router(lambda request: "ada").get("/user/:id", show)
        response = await router.dispatch(_get())
        assert response.text == "ada views 42"

    async def test_handler_without_context_parameter(self) -> None:
        router = Router(lambda request: "ada").get("/user/:id", lambda target: "plain")
        response = await router.dispatch(_get())
        assert response.text == "plain"

    async def test_builder_runs_per_handler_attempt(self) -> None:
        built: list[int] = []

        def builder(request):
            built.append(len(built))
            return len(built)

        def first(target, ctx):
            raise RuntimeError("first")

        def second(target, ctx):
            return str(ctx)

        router = Router(builder).get("/user/:id", first).get("/user/:id", second)
        response = await router.dispatch(_get())

        assert built == [0, 1]
        assert response.text == "2"

    async def test_short_circuit_skips_remaining_candidates(self) -> None:
        calls: list[str] = []

        def builder(request):
            return ShortCircuit(Response("Unauthorized", status=401))

        def later(target):
            calls.append("later")
            return "ok"

        router = Router(builder).get("/user/:id", later).on("/user/:id", later)
        response = await router.dispatch(_get())

        assert response.status == 401
        assert response.text == "Unauthorized"
        assert calls == []

    async def test_short_circuit_after_earlier_failure(self) -> None:
        attempts = 0

        def builder(request):
            nonlocal attempts
            attempts += 1
            if attempts == 1:
                return "ctx"
            return ShortCircuit(Response("Forbidden", status=403))

        def first(target, ctx):
            raise RuntimeError("first")

        router = Router(builder).get("/user/:id", first).get("/user/:id", lambda t, c: "ok")
        response = await router.dispatch(_get())
        assert response.status == 403

    async def test_failure_skips_handler_requiring_context(self) -> None:
        def builder(request):
            raise PermissionError("no token")

        def needs_ctx(target, user):
            return "private"

        router = Router(builder).get("/user/:id", needs_ctx)
        response = await router.dispatch(_get())

        assert response.status == 500
        assert response.json() == {"message": "Internal error", "reason": "no token"}

    async def test_failure_still_runs_handler_with_optional_context(self) -> None:
        received = []

        def builder(request):
            raise PermissionError("no token")

        def maybe_ctx(target, user=None):
            received.append(user)
            return "public"

        router = Router(builder).get("/user/:id", maybe_ctx)
        response = await router.dispatch(_get())

        assert response.text == "public"
        assert received == [None]

    async def test_failure_falls_back_to_public_route(self) -> None:
        def builder(request):
            if request.headers.get("authorization") is None:
                return Failure("anonymous")
            return "ada"

        router = (
            Router(builder)
            .get("/profile/:id", lambda target, user: f"private for {user}")
            .get("/profile/:id", lambda target: "public")
        )

        anonymous = await router.dispatch(Request.create("GET", "app://profile/1"))
        signed_in = await router.dispatch(
            Request.create("GET", "app://profile/1", headers={"Authorization": "Bearer x"})
        )

        assert anonymous.text == "public"
        assert signed_in.text == "private for ada"

    async def test_non_exception_failure_reported_as_is(self) -> None:
        router = Router(lambda request: Failure({"code": "expired"})).get(
            "/user/:id", lambda target, user: "private"
        )
        response = await router.dispatch(_get())
        assert response.json()["reason"] == {"code": "expired"}

    async def test_builder_not_called_without_match(self) -> None:
        built: list[Request] = []

        def builder(request):
            built.append(request)
            return None

        router = Router(builder).get("/user/:id", lambda target, ctx: "ok")
        response = await router.dispatch(_get("app://other/42"))

        assert response.status == 404
        assert built == []
