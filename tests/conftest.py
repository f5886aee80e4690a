import pytest


@pytest.fixture
def lead_candidate() -> dict:
    return {
        "firstname": "John",
        "lastname": "Doe",
        "emailaddress1": "john@acme.com",
        "companyname": "Acme Inc",
        "telephone1": "555-0100",
    }


@pytest.fixture
def ranked_leads() -> list[dict]:
    """Seven leads that all clear the admission threshold against lead_candidate."""
    return [
        {
            "leadid": "L1",
            "firstname": "John",
            "lastname": "Doe",
            "emailaddress1": "john@acme.com",
            "companyname": "Acme Inc",
            "telephone1": "555-0100",
        },
        {
            "leadid": "L2",
            "firstname": "John",
            "lastname": "Doe",
            "emailaddress1": "john@acme.com",
            "companyname": "Acme Inc",
        },
        {
            "leadid": "L3",
            "firstname": "John",
            "lastname": "Doe",
            "emailaddress1": "john@acme.com",
            "telephone1": "555-0100",
        },
        {
            "leadid": "L4",
            "firstname": "John",
            "lastname": "Doe",
            "emailaddress1": "john@acme.com",
        },
        {
            "leadid": "L5",
            "firstname": "Zed",
            "lastname": "Quux",
            "emailaddress1": "john@acme.com",
            "companyname": "Acme Inc",
        },
        {
            "leadid": "L6",
            "firstname": "Zed",
            "lastname": "Quux",
            "emailaddress1": "john@acme.com",
            "telephone1": "555-0100",
        },
        {
            "leadid": "L7",
            "firstname": "John",
            "lastname": "Doe",
            "emailaddress1": "other@else.org",
            "companyname": "Acme Inc",
            "telephone1": "555-0100",
        },
    ]
