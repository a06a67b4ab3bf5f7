"""Shared fixtures for crateindex tests."""

import pytest

from crateindex.cargo import Metadata, metadata_from_dict
from crateindex.core.index import Index
from tests.helpers import third_party_metadata


@pytest.fixture
def snapshot() -> Metadata:
    """The standard third-party snapshot, decoded."""
    return metadata_from_dict(third_party_metadata())


@pytest.fixture
def index(snapshot: Metadata) -> Index:
    """Index over the standard snapshot with a real root."""
    return Index(snapshot)
