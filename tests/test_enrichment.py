import shutil
import socket

import pytest

from asciilog.enrichment import (
    NO_WHOIS_ENTRIES,
    country_for,
    enrich,
    hostname_for,
    resolve_hostnames,
    whois_record,
)
from asciilog.errors import WhoisExecutionError


def test_hostname_for_uses_first_name(fake_resolver):
    assert hostname_for("1.1.1.1", resolver=fake_resolver) == "one.one.one.one"


def test_hostname_for_resolver_error(fake_resolver):
    assert hostname_for("203.0.113.5", resolver=fake_resolver) == "N/A"


def test_hostname_for_empty_name():
    assert hostname_for("203.0.113.5", resolver=lambda ip: ("", [], [ip])) == "N/A"


def test_hostname_for_gaierror():
    def resolver(ip):
        raise socket.gaierror(-2, "Name or service not known")
    assert hostname_for("203.0.113.5", resolver=resolver) == "N/A"


def test_resolve_hostnames(fake_resolver):
    assert resolve_hostnames(["1.1.1.1", "203.0.113.5"], resolver=fake_resolver) == {
        "1.1.1.1": "one.one.one.one",
        "203.0.113.5": "N/A",
    }


@pytest.mark.skipif(shutil.which("echo") is None, reason="needs echo")
def test_whois_record_captures_output():
    assert whois_record("1.2.3.4", command="echo") == "1.2.3.4\n"


def test_whois_record_missing_binary():
    with pytest.raises(WhoisExecutionError) as excinfo:
        whois_record("1.2.3.4", command="no-such-whois-binary-here")
    assert excinfo.value.ip == "1.2.3.4"


@pytest.mark.skipif(shutil.which("false") is None, reason="needs false")
def test_whois_record_non_zero_exit():
    with pytest.raises(WhoisExecutionError, match="exit status 1"):
        whois_record("1.2.3.4", command="false")


def test_country_for_simple():
    assert country_for("country: US\n") == "US"


def test_country_for_missing_field():
    assert country_for("netname: EXAMPLE\n") == "--"


def test_country_for_is_case_insensitive():
    assert country_for("NetName: X\nCountry:        de\n") == "de"


def test_country_for_skips_non_code_tokens():
    assert country_for("country: 123 GB\n") == "GB"


def test_country_for_value_too_short():
    assert country_for("country: X\n") == "--"


def test_country_for_no_two_letter_token():
    assert country_for("country: Australia\n") == "--"


def test_country_for_requires_newline():
    assert country_for("country: US") == "--"


def test_country_for_uses_first_field_only():
    record = "Country: US\nremarks: delegated\ncountry: DE\n"
    assert country_for(record) == "US"


def test_enrich_collects_countries(fake_whois):
    summary = enrich(["1.1.1.1", "9.9.9.9"], lookup=fake_whois)

    assert summary.countries == {"1.1.1.1": "AU", "9.9.9.9": "US"}
    assert summary.entries == 2
    assert summary.error is None
    assert summary.text.startswith(
        "Whois Entry for the following: 1.1.1.1\n"
        "inetnum:        1.1.1.0 - 1.1.1.255\n"
        "country:        AU\n"
        "\n"
        "---------------------\n"
        "\n"
    )
    assert NO_WHOIS_ENTRIES not in summary.text


def test_enrich_no_data_blocks():
    records = {"1.1.1.1": "", "2.2.2.2": "<nil>"}
    summary = enrich(["1.1.1.1", "2.2.2.2"], lookup=records.get)

    assert summary.countries == {}
    assert summary.entries == 0
    assert summary.text == (
        "Whois Entry for the following: 1.1.1.1\nN/A\n\n---------------------\n\n"
        "Whois Entry for the following: 2.2.2.2\nN/A\n\n---------------------\n\n"
        "No whois entries given at this time."
    )


def test_enrich_stops_at_first_error_and_keeps_partial_results():
    calls = []

    def lookup(ip):
        calls.append(ip)
        if ip == "2.2.2.2":
            raise WhoisExecutionError(ip, "exit status 1")
        return "country: AU\n"

    summary = enrich(["1.1.1.1", "2.2.2.2", "3.3.3.3"], lookup=lookup)

    assert calls == ["1.1.1.1", "2.2.2.2"]
    assert summary.countries == {"1.1.1.1": "AU"}
    assert summary.error.ip == "2.2.2.2"
    assert "1.1.1.1" in summary.text
    assert "3.3.3.3" not in summary.text


def test_enrich_skips_empty_addresses(fake_whois):
    summary = enrich(["", "1.1.1.1"], lookup=fake_whois)
    assert list(summary.countries) == ["1.1.1.1"]


def test_enrich_nothing_to_do():
    summary = enrich([], lookup=lambda ip: pytest.fail("should not be called"))
    assert summary.text == NO_WHOIS_ENTRIES


def test_country_for_tab_separated_value():
    assert country_for("country:\tNL\n") == "NL"
