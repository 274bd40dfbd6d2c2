import pytest

from better_disperse.models import CandidateAddress

from .constants import CREATEX, LEGACY


@pytest.fixture
def candidates() -> list[CandidateAddress]:
    return [
        CandidateAddress(address=LEGACY, label="legacy"),
        CandidateAddress(address=CREATEX, label="createx"),
    ]
