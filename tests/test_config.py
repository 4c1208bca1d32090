import pytest
from pydantic import ValidationError

from idea_analysis.config import Settings
from idea_analysis.main import build_retry_policy


@pytest.mark.parametrize("field", ["section_max_retries", "persistence_max_retries"])
def test_negative_retry_counts_are_rejected(field):
    with pytest.raises(ValidationError):
        Settings(**{field: -1})


def test_zero_timeout_is_rejected():
    with pytest.raises(ValidationError):
        Settings(section_timeout_seconds=0)


def test_retry_policy_follows_settings():
    settings = Settings(
        section_timeout_seconds=30,
        section_max_retries=0,
        persistence_max_retries=1,
    )

    policy = build_retry_policy(settings)

    assert policy.timeout_seconds == 30
    assert policy.max_retries == 0
    assert policy.persistence_max_retries == 1
