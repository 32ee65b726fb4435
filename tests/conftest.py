"""
Fixtures compartidas: fakes en memoria de OpenAI, Supabase y la sesión HTTP.

Los fakes imitan solo la parte de cada cliente que usa el core:
- OpenAI: `client.chat.completions.create(...)`
- Supabase: `client.table(...).select/insert/delete/eq/order/limit/execute()`
  y `client.storage.from_(bucket).upload/get_public_url/remove`
- Supabase Auth: `client.auth.get_user(jwt)`
- requests: `session.get(url, timeout=...)` devolviendo un `requests.Response` real;
  se usa como context manager, igual que `requests.Session`
"""

import base64
import copy
import itertools
import json
import time
from types import SimpleNamespace

import jwt
import pytest
import requests
from requests.structures import CaseInsensitiveDict

from pantry_chef_core.config import Settings
from pantry_chef_core.db.repository import PantryRepository
from pantry_chef_core.db.storage import ImageStorage

TEST_JWT_SECRET = "test-secret-for-unit-tests-only-0123456789"


def make_token(user_id="user-1", secret=TEST_JWT_SECRET, expires_in=3600, **claims):
    """Access token con la forma de los que emite Supabase Auth."""
    payload = {
        "sub": user_id,
        "aud": "authenticated",
        "role": "authenticated",
        "exp": int(time.time()) + expires_in,
    }
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm="HS256")


def make_unsigned_token(user_id="user-1"):
    """Token con `alg: none` y firma vacía."""
    def segment(data):
        raw = json.dumps(data, separators=(",", ":")).encode()
        return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()

    header = segment({"alg": "none", "typ": "JWT"})
    payload = segment({"sub": user_id, "aud": "authenticated", "exp": int(time.time()) + 3600})
    return f"{header}.{payload}."


# ============================================================
# OpenAI
# ============================================================

class FakeCompletions:
    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=reply))]
        )


class FakeOpenAI:
    def __init__(self, *replies):
        self.completions = FakeCompletions(replies or ["[]"])
        self.chat = SimpleNamespace(completions=self.completions)

    @property
    def calls(self):
        return self.completions.calls

    def close(self):
        pass


# ============================================================
# HTTP
# ============================================================

def make_response(url, status=200, content=b"\x89PNG fake", content_type="image/png"):
    response = requests.Response()
    response.status_code = status
    response._content = content
    response.url = url
    response.headers = CaseInsensitiveDict()
    if content_type is not None:
        response.headers["Content-Type"] = content_type
    return response


class FakeHttp:
    """Sesión HTTP que devuelve respuestas predefinidas por URL."""

    def __init__(self, responses=None, error=None):
        self.responses = responses or {}
        self.error = error
        self.requested = []
        self.opened = 0
        self.closed = 0

    def __enter__(self):
        self.opened += 1
        return self

    def __exit__(self, *exc_info):
        self.close()
        return False

    def get(self, url, timeout=None):
        self.requested.append(url)
        if self.error is not None:
            raise self.error
        if url in self.responses:
            return self.responses[url]
        return make_response(url, status=404, content=b"not found", content_type="text/plain")

    def close(self):
        self.closed += 1


# ============================================================
# Supabase
# ============================================================

class FakeQuery:
    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = "select"
        self.columns = "*"
        self.count_mode = None
        self.payload = None
        self.filters = []
        self.order_by = None
        self.limit_n = None

    def select(self, columns="*", count=None):
        self.op = "select"
        self.columns = columns
        self.count_mode = count
        return self

    def insert(self, payload):
        self.op = "insert"
        self.payload = payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: str(row.get(column)) == str(value))
        return self

    def in_(self, column, values):
        wanted = {str(v) for v in values}
        self.filters.append(lambda row: str(row.get(column)) in wanted)
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, n):
        self.limit_n = n
        return self

    def execute(self):
        self.db.calls.append((self.table, self.op))
        if (self.table, self.op) in self.db.fail_on:
            raise RuntimeError(f"simulated PostgREST failure on {self.table}.{self.op}")

        rows = self.db.tables.setdefault(self.table, [])

        if self.op == "insert":
            items = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = []
            for item in items:
                row = copy.deepcopy(item)
                row.setdefault("id", f"{self.table}-{next(self.db.ids)}")
                row.setdefault("created_at", self.db.next_timestamp())
                rows.append(row)
                inserted.append(copy.deepcopy(row))
            return SimpleNamespace(data=inserted, count=None)

        matched = [r for r in rows if all(f(r) for f in self.filters)]

        if self.op == "delete":
            for row in matched:
                rows.remove(row)
            return SimpleNamespace(data=copy.deepcopy(matched), count=None)

        total = len(matched)
        if self.order_by:
            column, desc = self.order_by
            matched = sorted(matched, key=lambda r: r.get(column) or "", reverse=desc)
        if self.limit_n is not None:
            matched = matched[: self.limit_n]

        out = []
        for row in matched:
            row = copy.deepcopy(row)
            if "recipe:recipes(*)" in self.columns:
                recipe = next(
                    (r for r in self.db.tables.get("recipes", []) if r["id"] == row["recipe_id"]),
                    None,
                )
                row["recipe"] = copy.deepcopy(recipe)
            out.append(row)
        return SimpleNamespace(data=out, count=total if self.count_mode else None)


class FakeBucket:
    def __init__(self, storage, name):
        self.storage = storage
        self.name = name

    def upload(self, path, file, file_options=None):
        if self.storage.fail_uploads:
            raise RuntimeError("simulated storage failure")
        self.storage.objects[(self.name, path)] = (file, file_options or {})
        return SimpleNamespace(path=path)

    def get_public_url(self, path):
        return f"https://fake.supabase.co/storage/v1/object/public/{self.name}/{path}"

    def remove(self, paths):
        for path in paths:
            self.storage.objects.pop((self.name, path), None)


class FakeStorage:
    def __init__(self, buckets=("images",)):
        self.buckets = list(buckets)
        self.objects = {}
        self.fail_uploads = False

    def from_(self, bucket):
        return FakeBucket(self, bucket)

    def list_buckets(self):
        return [SimpleNamespace(name=name) for name in self.buckets]


class FakeAuth:
    """`client.auth.get_user(jwt)`: solo conoce los tokens registrados."""

    def __init__(self):
        self.users_by_token = {}

    def get_user(self, jwt=None):
        user_id = self.users_by_token.get(jwt)
        if user_id is None:
            raise RuntimeError("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=SimpleNamespace(id=user_id))


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.calls = []
        self.fail_on = set()
        self.ids = itertools.count(1)
        self._ticks = itertools.count(1)
        self.storage = FakeStorage()
        self.auth = FakeAuth()

    def next_timestamp(self):
        n = next(self._ticks)
        return f"2024-06-01T10:{n // 60:02d}:{n % 60:02d}+00:00"

    def table(self, name):
        return FakeQuery(self, name)


# ============================================================
# Fixtures
# ============================================================

@pytest.fixture
def settings():
    return Settings(
        openai_api_key="sk-test-1234567890",
        openai_model_vision="gpt-4o-mini",
        openai_model_text="gpt-4.1-mini",
        supabase_url="https://fake.supabase.co",
        supabase_anon_key="anon-key",
        supabase_jwt_secret=TEST_JWT_SECRET,
    )


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def repository(fake_supabase):
    return PantryRepository(fake_supabase)


@pytest.fixture
def storage(fake_supabase):
    return ImageStorage(fake_supabase, bucket="images", prefix="ingredient-photos", clock=lambda: 1718040000123)


@pytest.fixture
def sample_recipe_rows():
    return [
        {
            "title": "Tomato Omelette",
            "description": "Fluffy eggs with fresh tomato",
            "ingredients": ["3 eggs", "1 tomato", "salt"],
            "steps": ["Beat the eggs", "Dice the tomato", "Cook everything"],
            "category": "main dish",
            "estimated_time": "15 minutes",
            "servings": 2,
        },
        {
            "title": "Caprese Salad",
            "description": "Classic Italian salad",
            "ingredients": ["2 tomatoes", "mozzarella", "basil"],
            "steps": ["Slice", "Layer", "Season"],
            "category": "appetizer",
            "estimated_time": "10 minutes",
            "servings": 4,
        },
    ]
