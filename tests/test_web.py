import json
import tempfile
import unittest
from pathlib import Path

from fastapi.testclient import TestClient

from toolshed.web.server import create_app


class TestWebApi(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        path = Path(self._tmp.name) / "kb.json"
        path.write_text(
            json.dumps({"content": {"faq": {"content": "Bambi is a hypnosis persona.", "full_length": 27}}}),
            encoding="utf-8",
        )
        self.client = TestClient(create_app(data_path=str(path)))

    def tearDown(self):
        self._tmp.cleanup()

    def test_health(self):
        r = self.client.get("/api/health")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["sections"], ["faq"])

    def test_call_tool(self):
        r = self.client.post("/api/tools/rag_query", json={"query": "hypnosis"})
        body = r.json()
        self.assertTrue(body["ok"])
        self.assertEqual(body["result"]["total_found"], 1)

    def test_call_unknown_tool(self):
        body = self.client.post("/api/tools/nonexistent_tool", json={}).json()
        self.assertFalse(body["ok"])
        self.assertTrue(body["is_error"])
        self.assertIn("Unknown tool", body["text"])

        again = self.client.post("/api/tools/get_metadata").json()
        self.assertTrue(again["ok"])

    def test_resources(self):
        listed = self.client.get("/api/resources").json()["resources"]
        self.assertEqual(len(listed), 5)

        r = self.client.get("/api/resource", params={"uri": "kb://data/faq"})
        self.assertEqual(r.json()["text"], "Bambi is a hypnosis persona.")

        missing = self.client.get("/api/resource", params={"uri": "kb://data/safety"})
        self.assertEqual(missing.status_code, 404)


if __name__ == "__main__":
    unittest.main()
