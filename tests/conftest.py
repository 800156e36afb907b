"""Pytest configuration and fixtures."""

import os
from collections.abc import Generator

import mongomock
import pytest
from fastapi.testclient import TestClient

# Set test environment before importing app modules
os.environ["SUMMARY_BACKEND"] = "template"

import database
from blobstore import BlobStore, get_blob_store
from main import app
from summary import TemplateSummarizer, get_summarizer


@pytest.fixture
def mongo_db(monkeypatch):
    """Fresh in-process Mongo database for each test."""
    client = mongomock.MongoClient()
    db = client["report_test"]
    monkeypatch.setattr(database, "_client", client)
    monkeypatch.setattr(database, "_db", db)
    return db


@pytest.fixture
def blob_store(tmp_path) -> BlobStore:
    return BlobStore(str(tmp_path / "uploads"))


@pytest.fixture
def client(mongo_db, blob_store) -> Generator[TestClient, None, None]:
    """Test client backed by mongomock and a temporary upload dir."""
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    app.dependency_overrides[get_summarizer] = TemplateSummarizer
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_activity(**overrides) -> dict:
    activity = {
        "date": "2024-03-05",
        "name": "Faculty meeting",
        "category": "academics",
        "duration_hours": 2,
        "output": "Minutes drafted",
        "notes": "",
    }
    activity.update(overrides)
    return activity


def make_finance(**overrides) -> dict:
    finance = {
        "date": "2024-03-10",
        "category": "grant",
        "income": 100,
        "expense": 40,
        "notes": "",
    }
    finance.update(overrides)
    return finance
