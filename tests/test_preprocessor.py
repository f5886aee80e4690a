import math

import pytest

from crm_dedupe.core.preprocessor import (
    email_domain,
    is_absent,
    WebDomainPreprocessor,
    normalize,
    registry,
    web_domain,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, ""),
        ("", ""),
        ("   ", ""),
        ("  Acme, Inc.  ", "acme inc"),
        ("Foo\t\n   Bar", "foo bar"),
        ("a !", "a"),
        ("+1 (555) 010-2000", "1 555 0102000"),
        (5550100, "5550100"),
        (math.nan, ""),
    ],
)
def test_normalize(raw, expected) -> None:
    assert normalize(raw) == expected


@pytest.mark.parametrize(
    "raw",
    ["a !", "  --x--  y ", "Jean-Luc  O'Neil", "Ünïcode Çafé", "john@acme.com", "!!", "A  b\tC"],
)
def test_normalize_is_idempotent(raw) -> None:
    once = normalize(raw)
    assert normalize(once) == once


def test_normalize_drops_non_ascii_letters() -> None:
    assert normalize("José Müller") == "jos mller"


@pytest.mark.parametrize(
    "email, expected",
    [
        ("John@Acme.COM", "acme.com"),
        ("no-at-sign", ""),
        ("a@b@c", "b@c"),
        ("", ""),
        (None, ""),
    ],
)
def test_email_domain(email, expected) -> None:
    assert email_domain(email) == expected


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://www.acme.com", "acmecom"),
        ("http://acme.com", "acmecom"),
        ("www.acme.com", "acmecom"),
        ("acme.com", "acmecom"),
        ("HTTPS://WWW.Acme.com/", "acmecom"),
        ("https://", ""),
        (None, ""),
    ],
)
def test_web_domain(url, expected) -> None:
    assert web_domain(url) == expected


def test_is_absent() -> None:
    assert is_absent(None)
    assert is_absent("")
    assert is_absent(math.nan)
    assert not is_absent(" ")
    assert not is_absent(0)
    assert not is_absent({"id": "A1"})


def test_registry_rejects_unknown_preprocessor() -> None:
    with pytest.raises(ValueError, match="Unknown preprocessor type"):
        registry.create("soundex")


def test_registry_creates_domain_preprocessors() -> None:
    assert isinstance(registry.create("web_domain"), WebDomainPreprocessor)
    assert registry.create("email_domain").process("x@Acme.com") == "acme.com"
    assert registry.create("web_domain").process("www.acme.com") == "acmecom"
    assert registry.create("email_domain").process(None) == ""


def test_registry_has_no_plain_text_preprocessor() -> None:
    with pytest.raises(ValueError):
        registry.create("text")


def test_web_domain_strips_http_residue_from_domain_names() -> None:
    # once punctuation is gone a scheme cannot be told apart from a domain
    # that starts with "http", so these collapse
    assert web_domain("http://sexample.com") == web_domain("example.com") == "examplecom"
    assert web_domain("httpbin.org") == "binorg"
    assert web_domain("www.httpbin.org") == "httpbinorg"
