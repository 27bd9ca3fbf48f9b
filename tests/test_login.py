"""
Tests for the login protocol – outcome classification, transfer relay,
session materialization.
"""

import json
import unittest
import urllib.parse
from unittest.mock import MagicMock

import requests
from urllib3 import HTTPHeaderDict

from steamguard.api.responses import LoginResponse, LoginTransferParameters, OAuthData
from steamguard.auth.login import (
    NoCredentials,
    OAuthOutcome,
    TransferOutcome,
    build_login_params,
    build_session_record,
    classify_login,
    classify_transfer,
    login_cookie,
    oauth_from_transfer,
)
from steamguard.client import SteamApiClient
from steamguard.errors import (
    DecodeError,
    LoginProtocolError,
    MalformedSession,
    NoCredentialsReceived,
    TransportError,
)
from steamguard.logging_setup import TRACE, log
from steamguard.session import Secret, Session

TRANSFER_URLS = [
    "https://store.steampowered.com/login/transfer",
    "https://help.steampowered.com/login/transfer",
]
TRANSFER_PARAMS = {
    "steamid": "76561198000000000",
    "token_secure": "S",
    "auth": "AUTH",
    "remember_login": True,
    "webcookie": "WC",
}


def make_response(body, status_code=200, set_cookies=()):
    resp = MagicMock(spec=requests.Response)
    resp.status_code = status_code
    resp.text = body if isinstance(body, str) else json.dumps(body)
    resp.headers = {"Content-Type": "application/json"}
    resp.raw = MagicMock()
    resp.raw.headers = HTTPHeaderDict()
    for cookie in set_cookies:
        resp.raw.headers.add("Set-Cookie", cookie)
    return resp


def install_transport(client, *responses):
    """Replace the HTTP session's send(); returns the list of sent requests."""
    sent = []
    queue = list(responses)

    def fake_send(prepared, **kwargs):
        sent.append(prepared)
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    client.http.send = MagicMock(side_effect=fake_send)
    return sent


def form(prepared):
    return {k: v[0] for k, v in urllib.parse.parse_qs(prepared.body, keep_blank_values=True).items()}


def existing_secret():
    return Secret(Session(
        session_id="OLD",
        steam_login="2%7C%7CX",
        steam_login_secure="2%7C%7CY",
        web_cookie=None,
        token="OLDTOKEN",
        steam_id=2,
    ))


class TestClassifyLogin(unittest.TestCase):
    def test_inline_oauth(self):
        resp = LoginResponse.from_dict({"oauth": {
            "oauth_token": "T", "steamid": "1", "wgtoken": "A", "wgtoken_secure": "B",
        }})
        self.assertIsInstance(classify_login(resp), OAuthOutcome)

    def test_oauth_wins_over_transfer(self):
        resp = LoginResponse.from_dict({
            "oauth": {"oauth_token": "T", "steamid": "1", "wgtoken": "A", "wgtoken_secure": "B"},
            "transfer_urls": TRANSFER_URLS,
            "transfer_parameters": TRANSFER_PARAMS,
        })
        self.assertIsInstance(classify_login(resp), OAuthOutcome)

    def test_transfer(self):
        resp = LoginResponse.from_dict({
            "transfer_urls": TRANSFER_URLS,
            "transfer_parameters": TRANSFER_PARAMS,
        })
        outcome = classify_login(resp)
        self.assertIsInstance(outcome, TransferOutcome)
        self.assertEqual(outcome.urls, TRANSFER_URLS)

    def test_neither(self):
        self.assertIsInstance(classify_login(LoginResponse.from_dict({"success": False})), NoCredentials)

    def test_urls_without_parameters(self):
        resp = LoginResponse.from_dict({"transfer_urls": TRANSFER_URLS})
        with self.assertRaises(LoginProtocolError) as ctx:
            classify_login(resp)
        self.assertIn("transfer_parameters", str(ctx.exception))

    def test_parameters_without_urls(self):
        resp = LoginResponse.from_dict({"transfer_parameters": TRANSFER_PARAMS})
        with self.assertRaises(LoginProtocolError) as ctx:
            classify_transfer(resp)
        self.assertIn("transfer_urls", str(ctx.exception))


class TestSessionMaterialization(unittest.TestCase):
    def test_login_cookie_format(self):
        self.assertEqual(login_cookie("1", "A"), "1%7C%7CA")

    def test_build_session_record(self):
        oauth = OAuthData(oauth_token="T", steamid="1", wgtoken="A", wgtoken_secure="B", webcookie="W")
        session = build_session_record(oauth, "XYZ")
        self.assertEqual(session.token, "T")
        self.assertEqual(session.steam_id, 1)
        self.assertEqual(session.session_id, "XYZ")
        self.assertEqual(session.steam_login, "1%7C%7CA")
        self.assertEqual(session.steam_login_secure, "1%7C%7CB")
        self.assertEqual(session.web_cookie, "W")

    def test_login_cookie_keeps_provider_steamid_text(self):
        oauth = OAuthData(oauth_token="T", steamid="0001", wgtoken="A", wgtoken_secure="B")
        session = build_session_record(oauth, "XYZ")
        self.assertEqual(session.steam_id, 1)
        self.assertEqual(session.steam_login, "0001%7C%7CA")
        self.assertEqual(session.steam_login_secure, "0001%7C%7CB")

    def test_bad_steamid(self):
        oauth = OAuthData(oauth_token="T", steamid="abc", wgtoken="A", wgtoken_secure="B")
        with self.assertRaises(MalformedSession):
            build_session_record(oauth, "XYZ")

    def test_transfer_reuses_secure_token(self):
        oauth = oauth_from_transfer(LoginTransferParameters.from_dict(TRANSFER_PARAMS))
        self.assertEqual(oauth.oauth_token, "AUTH")
        self.assertEqual(oauth.wgtoken, "S")
        self.assertEqual(oauth.wgtoken_secure, "S")
        self.assertEqual(oauth.webcookie, "WC")


class TestBuildLoginParams(unittest.TestCase):
    def test_fields(self):
        params = build_login_params("alice", "ENC", rsa_timestamp="123")
        self.assertEqual(
            set(params),
            {"username", "password", "twofactorcode", "emailauth", "captchagid", "captcha_text",
             "rsatimestamp", "remember_login", "oauth_client_id", "oauth_scope", "donotcache"},
        )
        self.assertEqual(params["password"], "ENC")
        self.assertEqual(params["rsatimestamp"], "123")
        self.assertEqual(params["remember_login"], "true")
        self.assertEqual(params["oauth_client_id"], "DE45CD61")
        self.assertEqual(params["oauth_scope"], "read_profile write_profile read_client write_client")
        self.assertTrue(params["donotcache"].endswith("000"))


class TestClientLogin(unittest.TestCase):
    def test_inline_oauth_scenario(self):
        client = SteamApiClient()
        body = {"success": True, "login_complete": True, "oauth": {
            "oauth_token": "T", "steamid": "1", "wgtoken": "A", "wgtoken_secure": "B", "webcookie": "W",
        }}
        sent = install_transport(client, make_response(body, set_cookies=["sessionid=XYZ; Path=/"]))

        result = client.login("alice", "ENCRYPTED", rsa_timestamp="1000")

        self.assertTrue(result.success)
        self.assertEqual(len(sent), 1)
        self.assertEqual(sent[0].method, "POST")
        self.assertEqual(sent[0].url, "https://steamcommunity.com/login/dologin")
        fields = form(sent[0])
        self.assertEqual(fields["username"], "alice")
        self.assertEqual(fields["password"], "ENCRYPTED")
        self.assertEqual(fields["twofactorcode"], "")

        session = client.session.expose_secret()
        self.assertEqual(session.token, "T")
        self.assertEqual(session.steam_id, 1)
        self.assertEqual(session.session_id, "XYZ")
        self.assertEqual(session.steam_login, "1%7C%7CA")
        self.assertEqual(session.steam_login_secure, "1%7C%7CB")
        self.assertEqual(session.web_cookie, "W")

    def test_transfer_scenario(self):
        client = SteamApiClient()
        body = {"success": True, "transfer_urls": TRANSFER_URLS, "transfer_parameters": TRANSFER_PARAMS}
        sent = install_transport(
            client,
            make_response(body, set_cookies=["sessionid=XYZ"]),
            make_response("", set_cookies=["steamLoginSecure=abc"]),
            make_response(""),
        )

        client.login("alice", "ENCRYPTED")

        self.assertEqual(len(sent), 1 + len(TRANSFER_URLS))
        self.assertEqual([p.url for p in sent[1:]], TRANSFER_URLS)
        for prepared in sent[1:]:
            self.assertEqual(json.loads(prepared.body), TRANSFER_PARAMS)
            self.assertIn("sessionid=XYZ", prepared.headers["Cookie"])
        session = client.session.expose_secret()
        self.assertEqual(session.token, "AUTH")
        self.assertEqual(session.steam_id, 76561198000000000)
        self.assertEqual(session.steam_login, "76561198000000000%7C%7CS")
        self.assertEqual(session.steam_login_secure, "76561198000000000%7C%7CS")
        self.assertEqual(client.cookies.get("steamLoginSecure"), "abc")

    def test_transfer_relogin_uses_fresh_sessionid(self):
        old = existing_secret()
        client = SteamApiClient(session=old)
        body = {"success": True, "transfer_urls": TRANSFER_URLS, "transfer_parameters": TRANSFER_PARAMS}
        sent = install_transport(
            client,
            make_response(body, set_cookies=["sessionid=NEW"]),
            make_response(""),
            make_response(""),
        )

        client.login("alice", "ENCRYPTED")

        self.assertIn("sessionid=OLD", sent[0].headers["Cookie"])
        for prepared in sent[1:]:
            self.assertIn("sessionid=NEW", prepared.headers["Cookie"])
            self.assertNotIn("sessionid=OLD", prepared.headers["Cookie"])
        self.assertEqual(client.session.expose_secret().session_id, "NEW")
        self.assertEqual(client.cookies.get("sessionid"), "NEW")
        self.assertTrue(old.is_zeroized)

        # the next authenticated call sends the new id
        sent = install_transport(client, make_response({"has_phone": True}))
        client.has_phone()
        self.assertIn("sessionid=NEW", sent[0].headers["Cookie"])

    def test_transfer_login_direct(self):
        client = SteamApiClient()
        client.cookies.set("sessionid", "XYZ")
        sent = install_transport(client, make_response(""), make_response(""))
        resp = LoginResponse.from_dict({"transfer_urls": TRANSFER_URLS, "transfer_parameters": TRANSFER_PARAMS})

        oauth = client.transfer_login(resp)

        self.assertEqual(len(sent), 2)
        self.assertEqual(oauth.oauth_token, "AUTH")
        self.assertEqual(client.session.expose_secret().session_id, "XYZ")

    def test_no_credentials_keeps_existing_session(self):
        old = existing_secret()
        client = SteamApiClient(session=old)
        body = {"success": False, "requires_twofactor": True, "message": ""}
        install_transport(client, make_response(body, set_cookies=["sessionid=NEW"]))

        with self.assertRaises(NoCredentialsReceived) as ctx:
            client.login("alice", "ENCRYPTED")

        self.assertTrue(ctx.exception.login_response.requires_twofactor)
        self.assertIn("no credentials received", str(ctx.exception))
        self.assertIs(client.session, old)
        self.assertFalse(old.is_zeroized)
        self.assertEqual(client.http.send.call_count, 1)

    def test_partial_transfer_is_protocol_error(self):
        client = SteamApiClient()
        install_transport(client, make_response({"transfer_urls": TRANSFER_URLS}, set_cookies=["sessionid=X"]))

        with self.assertRaises(LoginProtocolError):
            client.login("alice", "ENCRYPTED")
        self.assertIsNone(client.session)
        self.assertEqual(client.http.send.call_count, 1)

    def test_protocol_error_is_not_no_credentials(self):
        client = SteamApiClient()
        install_transport(client, make_response({"transfer_parameters": TRANSFER_PARAMS}))
        with self.assertRaises(LoginProtocolError) as ctx:
            client.login("alice", "ENCRYPTED")
        self.assertNotIsInstance(ctx.exception, NoCredentialsReceived)

    def test_bad_steamid_is_malformed_session(self):
        old = existing_secret()
        client = SteamApiClient(session=old)
        body = {"oauth": {"oauth_token": "T", "steamid": "nope", "wgtoken": "A", "wgtoken_secure": "B"}}
        install_transport(client, make_response(body, set_cookies=["sessionid=XYZ"]))

        with self.assertRaises(MalformedSession):
            client.login("alice", "ENCRYPTED")
        self.assertIs(client.session, old)

    def test_missing_sessionid_cookie_is_fatal(self):
        client = SteamApiClient()
        body = {"oauth": {"oauth_token": "T", "steamid": "1", "wgtoken": "A", "wgtoken_secure": "B"}}
        install_transport(client, make_response(body))

        with self.assertRaises(RuntimeError):
            client.login("alice", "ENCRYPTED")
        self.assertIsNone(client.session)

    def test_successful_login_wipes_previous_session(self):
        old = existing_secret()
        client = SteamApiClient(session=old)
        body = {"oauth": {"oauth_token": "T", "steamid": "1", "wgtoken": "A", "wgtoken_secure": "B"}}
        install_transport(client, make_response(body, set_cookies=["sessionid=XYZ"]))

        client.login("alice", "ENCRYPTED")

        self.assertTrue(old.is_zeroized)
        self.assertEqual(client.session.expose_secret().token, "T")

    def test_html_body_is_decode_error(self):
        client = SteamApiClient()
        install_transport(client, make_response("<html>Service Unavailable</html>", status_code=503))

        with self.assertRaises(DecodeError) as ctx:
            client.login("alice", "ENCRYPTED")
        self.assertEqual(ctx.exception.operation, "login")
        self.assertEqual(ctx.exception.status_code, 503)
        self.assertIn("Service Unavailable", ctx.exception.body)

    def test_decode_error_withholds_secret_body(self):
        client = SteamApiClient()
        body = {"oauth": {"oauth_token": "SECRETTOKEN", "steamid": "1"}}
        install_transport(client, make_response(body, set_cookies=["sessionid=XYZ"]))

        with self.assertLogs(log, level=TRACE) as logs:
            with self.assertRaises(DecodeError) as ctx:
                client.login("alice", "ENCRYPTED")

        self.assertIn("SECRETTOKEN", ctx.exception.body)
        self.assertNotIn("SECRETTOKEN", str(ctx.exception))
        self.assertIn("withheld", str(ctx.exception))
        for line in logs.output:
            self.assertNotIn("SECRETTOKEN", line)
        self.assertIsNone(client.session)

    def test_transport_error_propagates(self):
        client = SteamApiClient()
        install_transport(client, requests.ConnectionError("connection refused"))

        with self.assertRaises(TransportError) as ctx:
            client.login("alice", "ENCRYPTED")
        self.assertIsInstance(ctx.exception.__cause__, requests.ConnectionError)
        self.assertEqual(client.http.send.call_count, 1)


if __name__ == "__main__":
    unittest.main()
