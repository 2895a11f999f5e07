"""Tests for the advisory response engine."""

import random

import pytest

from conftest import make_bill
from powerpredict.advisor import (
    DEFAULT_SUGGESTIONS,
    GENERIC_TIPS,
    GREETINGS,
    NO_APPLIANCES_TEXT,
    category_tips,
    estimate_potential_savings,
    get_greeting,
    respond,
    top_appliance,
)
from powerpredict.enums import ResponseSource
from powerpredict.exceptions import AdvisoryInputError
from powerpredict.knowledge_base import get_topic


@pytest.fixture
def bill():
    return make_bill(
        [
            ("Refrigerator", "Kitchen", 40.0),
            ("Television", "Electronics", 30.0),
            ("Lights", "Lighting", 20.0),
            ("Washer", "Laundry", 30.0),
        ]
    )


def test_bill_response(bill):
    response = respond("How to reduce my bill?", bill)

    assert response.source is ResponseSource.BILL
    assert response.text == (
        "Your monthly bill is $120.00 with 120 kWh usage across 4 "
        'appliances. Your top energy consumer is "Refrigerator" at '
        "$40.00/month. You could potentially save $24.00/month with "
        "targeted improvements!"
    )
    assert response.suggestions == [
        "Use energy-efficient settings",
        "Keep refrigerator optimal temp",
        "Run full dishwasher loads",
    ]


def test_bill_branch_beats_topic(bill):
    response = respond("What does my AC cost?", bill)
    assert response.source is ResponseSource.BILL


def test_bill_keywords_need_a_bill():
    response = respond("What does my AC cost?")
    assert response.source is ResponseSource.TOPIC
    assert response.text in get_topic("cooling").responses


def test_bill_with_no_appliances():
    response = respond("reduce my costs", make_bill([]))
    assert response.source is ResponseSource.BILL
    assert response.text == NO_APPLIANCES_TEXT


def test_single_appliance_wording():
    response = respond("bill?", make_bill([("Heater", "Other", 10.0)]))
    assert "across 1 appliance." in response.text
    assert response.suggestions == list(GENERIC_TIPS)


def test_topic_response_is_reproducible():
    a = respond("LED vs incandescent bulbs", rng=random.Random(7))
    b = respond("LED vs incandescent bulbs", rng=random.Random(7))
    assert a == b
    assert a.source is ResponseSource.TOPIC
    assert len(a.suggestions) == 3


def test_default_without_bill():
    response = respond("xyz123")
    assert response.source is ResponseSource.DEFAULT
    assert response.text == (
        "I'm here to help you save energy and money! "
        "What would you like to focus on?"
    )
    assert response.suggestions == list(DEFAULT_SUGGESTIONS)


def test_default_with_bill_mentions_usage(bill):
    response = respond("xyz123", bill)
    assert "With your current usage of 120 kWh/month" in response.text


@pytest.mark.parametrize("query", ["", "   ", "\n\t"])
def test_blank_query_rejected(query):
    with pytest.raises(AdvisoryInputError):
        respond(query)


def test_top_appliance_tie_goes_to_first():
    bill = make_bill([("A", "Kitchen", 30.0), ("B", "Lighting", 30.0)])
    assert top_appliance(bill).appliance.name == "A"


def test_top_appliance_leaves_breakdown_alone(bill):
    before = [u.appliance.name for u in bill.appliance_breakdown]
    top_appliance(bill)
    assert [u.appliance.name for u in bill.appliance_breakdown] == before


def test_potential_savings(bill):
    assert estimate_potential_savings(bill) == pytest.approx(24.0)


def test_category_tips_fallback():
    assert category_tips("Workshop") == list(GENERIC_TIPS)
    assert category_tips("Laundry")[0] == "Wash in cold water"


def test_get_greeting():
    assert get_greeting(random.Random(1)) in GREETINGS
