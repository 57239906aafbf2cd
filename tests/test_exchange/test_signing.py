"""Tests for HMAC-SHA256 request signing."""

from portfolio_bot.exchange.signing import build_query, sign_payload, signed_query


class TestSignPayload:
    def test_rfc4231_vector(self) -> None:
        # RFC 4231 test case 2
        assert (
            sign_payload("Jefe", "what do ya want for nothing?")
            == "5bdcc146bf60754e6a042426089575c75a003f089d2739839dec58b964ec3843"
        )

    def test_exchange_documentation_vector(self) -> None:
        secret = "NhqPtmdSJYdKjVHjA7PZj4Mge3R5YNiP1e3UZjInClVN65XAbvqqM6A7H5fATj0j"
        query = (
            "symbol=LTCBTC&side=BUY&type=LIMIT&timeInForce=GTC&quantity=1"
            "&price=0.1&recvWindow=5000&timestamp=1499827319559"
        )
        assert (
            sign_payload(secret, query)
            == "c8db56825ae71d6d79447849e617115f4a920fa2acdcab2b053c4b2838bd6b71"
        )

    def test_hex_is_lower_case(self) -> None:
        digest = sign_payload("secret", "timestamp=1")
        assert digest == digest.lower()
        assert len(digest) == 64


class TestBuildQuery:
    def test_keeps_insertion_order(self) -> None:
        query = build_query({"symbol": "AVAXUSDT", "side": "SELL", "type": "MARKET"})
        assert query == "symbol=AVAXUSDT&side=SELL&type=MARKET"

    def test_skips_none(self) -> None:
        assert build_query({"symbol": "AVAXUSDT", "price": None}) == "symbol=AVAXUSDT"


class TestSignedQuery:
    def test_timestamp_only(self) -> None:
        query = signed_query({}, "secret", 1700000000000)
        expected_sig = sign_payload("secret", "timestamp=1700000000000")
        assert query == f"timestamp=1700000000000&signature={expected_sig}"

    def test_order_layout(self) -> None:
        params = {"symbol": "AVAXUSDT", "side": "SELL", "type": "MARKET", "quantity": "3.75"}
        query = signed_query(params, "secret", 1700000000000)
        canonical = "symbol=AVAXUSDT&side=SELL&type=MARKET&quantity=3.75&timestamp=1700000000000"
        assert query == f"{canonical}&signature={sign_payload('secret', canonical)}"
