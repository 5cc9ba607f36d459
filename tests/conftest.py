import socket

import pytest

ACCESS_LOG_LINES = [
    '1.1.1.1 - - [09/Oct/2023:23:59:01 -0700] "GET / HTTP/1.1" 200 612',
    '1.1.1.1 - - [10/Oct/2023:13:55:36 -0700] "GET / HTTP/1.1" 200 612',
    '9.9.9.9 - - [10/Oct/2023:13:56:00 -0700] "GET /missing HTTP/1.1" 404 153',
    '1.1.1.1 - - [10/Oct/2023:13:57:10 -0700] "GET /about HTTP/1.1" 200 2048',
]

HOSTNAMES = {
    "1.1.1.1": "one.one.one.one",
    "9.9.9.9": "dns9.quad9.net",
}

WHOIS_RECORDS = {
    "1.1.1.1": "inetnum:        1.1.1.0 - 1.1.1.255\ncountry:        AU\n",
    "9.9.9.9": "NetRange:       9.9.9.0 - 9.9.9.255\nCountry:        US\n",
}


@pytest.fixture
def access_log_lines():
    return list(ACCESS_LOG_LINES)


@pytest.fixture
def access_log_text(access_log_lines):
    return "\n".join(access_log_lines) + "\n"


@pytest.fixture
def fake_resolver():
    def resolve(ip):
        try:
            return HOSTNAMES[ip], [], [ip]
        except KeyError:
            raise socket.herror(1, "Unknown host")
    return resolve


@pytest.fixture
def fake_whois():
    def lookup(ip):
        return WHOIS_RECORDS.get(ip, "")
    return lookup
