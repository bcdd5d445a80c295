import json
import tempfile
import unittest
from pathlib import Path

import httpx

from challenge_roulette.challenges.loader import load_deck, parse_deck
from challenge_roulette.errors import DataUnavailable

DECK = {"challenges": [{"id": 1, "text": "Jump"}, {"id": 2, "text": "Sing"}]}


class ParseDeckTests(unittest.TestCase):
    def test_single_language_deck(self) -> None:
        challenges = parse_deck(json.dumps(DECK))
        self.assertEqual([c.id for c in challenges], [1, 2])
        self.assertEqual(challenges[1].payload, "Sing")

    def test_multilingual_deck(self) -> None:
        raw = json.dumps({"challenges": [{"id": 7, "texts": {"en": "Run", "es": "Corre"}}]})
        (challenge,) = parse_deck(raw)
        self.assertEqual(challenge.text_in("es"), "Corre")

    def test_failures(self) -> None:
        bad_inputs = [
            "not json",
            json.dumps([]),
            json.dumps({"challenges": []}),
            json.dumps({"challenges": [{"id": "x", "text": "a"}]}),
            json.dumps({"challenges": [{"id": "2", "text": "a"}]}),
            json.dumps({"challenges": [{"id": True, "text": "a"}]}),
            json.dumps({"challenges": [{"id": 3.0, "text": "a"}]}),
            json.dumps({"challenges": [{"id": 1}]}),
            json.dumps({"challenges": [{"id": 1, "text": "a"}, {"id": 1, "text": "b"}]}),
        ]
        for raw in bad_inputs:
            with self.subTest(raw=raw):
                with self.assertRaises(DataUnavailable):
                    parse_deck(raw)


class LoadDeckTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    async def test_load_from_file(self) -> None:
        path = self.tmp / "challenges.json"
        path.write_text(json.dumps(DECK), encoding="utf-8")
        challenges = await load_deck(path)
        self.assertEqual(len(challenges), 2)

    async def test_missing_file(self) -> None:
        with self.assertRaises(DataUnavailable) as ctx:
            await load_deck(self.tmp / "missing.json")
        self.assertIsInstance(ctx.exception.__cause__, OSError)

    async def test_load_from_url(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            self.assertEqual(request.url.path, "/challenges.json")
            return httpx.Response(200, json=DECK)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            challenges = await load_deck("https://example.test/challenges.json", client=client)
        self.assertEqual([c.id for c in challenges], [1, 2])

    async def test_http_error_status(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(404))
        async with httpx.AsyncClient(transport=transport) as client:
            with self.assertRaises(DataUnavailable) as ctx:
                await load_deck("https://example.test/challenges.json", client=client)
        self.assertIsInstance(ctx.exception.__cause__, httpx.HTTPStatusError)

    async def test_transport_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            with self.assertRaises(DataUnavailable):
                await load_deck("http://example.test/challenges.json", client=client)


if __name__ == "__main__":
    unittest.main()
