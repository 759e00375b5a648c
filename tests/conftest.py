"""Shared fixtures: an in-memory MongoDB collection and an API client bound to it."""

import mongomock
import pytest
from fastapi.testclient import TestClient

from main import app, get_store
from store import ExpenseStore


@pytest.fixture
def collection():
    return mongomock.MongoClient().db.expense


@pytest.fixture
def store(collection) -> ExpenseStore:
    return ExpenseStore(collection)


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def travel_expense() -> dict:
    return {
        "category": "Travel",
        "description": "Client visit - Berlin",
        "amount": 100.0,
        "optimizable": True,
        "savings": 20.0,
    }
