"""
Shared fixtures: a fixed "today" and a small two-currency dataset.
"""

from datetime import date
from decimal import Decimal

import pytest

TODAY = date(2024, 6, 10)
PAST_DATE = date(2024, 6, 7)
OLDER_DATE = date(2024, 6, 6)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def past_date():
    return PAST_DATE


@pytest.fixture
def older_date():
    return OLDER_DATE


@pytest.fixture
def sample_dataset():
    """USD has rates for both past dates and today, INR only for PAST_DATE."""
    return {
        'USD': {
            OLDER_DATE: Decimal('1.0880'),
            PAST_DATE: Decimal('1.2'),
            TODAY: Decimal('1.1'),
        },
        'INR': {
            PAST_DATE: Decimal('98.4'),
        },
    }
