"""Records — an ``app://`` scheme backed by an in-memory store.

Demonstrates:
- path parameters (``/records/user/:id``)
- a context builder that authenticates from the ``Authorization`` header
- fallback chains: a private view first, a public view when the
  caller is anonymous
- handlers bringing their own lock for shared state

Run: protoroute run examples.records.app:transport
"""

from dataclasses import asdict, dataclass

import anyio

from protoroute import (
    Failure,
    ProtocolProvider,
    Response,
    Router,
    Scheme,
    SchemeTransport,
    ShortCircuit,
    TransportConfig,
)

TOKENS = {"token-ada": "ada", "token-grace": "grace"}


@dataclass(slots=True)
class User:
    id: str
    name: str
    email: str
    owner: str


class Store:
    """Users keyed by id. The router does not synchronize handlers; this lock does."""

    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._next_id = 1
        self._lock = anyio.Lock()

    async def add(self, name: str, email: str, owner: str) -> User:
        async with self._lock:
            user = User(id=str(self._next_id), name=name, email=email, owner=owner)
            self._users[user.id] = user
            self._next_id += 1
            return user

    async def get(self, user_id: str) -> User | None:
        async with self._lock:
            return self._users.get(user_id)

    async def remove(self, user_id: str) -> User | None:
        async with self._lock:
            return self._users.pop(user_id, None)


store = Store()


def authenticate(request):
    """Resolve the caller from ``Authorization: Bearer <token>``."""
    header = request.headers.get("authorization")
    if header is None:
        return Failure("anonymous")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or token not in TOKENS:
        return ShortCircuit(Response.from_json({"message": "Unauthorized"}, status=401))
    return TOKENS[token]


async def show_user(target, caller):
    user = await store.get(target.params["id"])
    if user is None:
        return None
    return asdict(user)


async def show_public_profile(target):
    user = await store.get(target.params["id"])
    if user is None:
        return None
    return {"id": user.id, "name": user.name}


async def create_user(target, caller):
    data = await target.request.json()
    user = await store.add(data["name"], data["email"], owner=caller)
    return asdict(user), 201


async def delete_user(target, caller):
    user = await store.get(target.params["id"])
    if user is None:
        return None
    if user.owner != caller:
        return Response.from_json({"message": "Forbidden"}, status=403)
    await store.remove(user.id)
    return Response(status=204)


def ping(target):
    return "pong"


def make_router() -> Router:
    return (
        Router(authenticate)
        .get("/records/user/:id", show_user)
        .get("/records/user/:id", show_public_profile)
        .post("/records/user", create_user)
        .delete("/records/user/:id", delete_user)
        .on("/records/ping", ping)
    )


router = make_router()

transport = SchemeTransport(TransportConfig(default_scheme="app"))
provider = ProtocolProvider(Scheme("app", standard=True, secure=True, cors_enabled=True), make_router)
provider.apply(transport)
