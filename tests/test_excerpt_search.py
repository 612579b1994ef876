import unittest

from toolshed.kb.search import excerpt_window, search
from toolshed.kb.store import KnowledgeBase


def _kb(**sections):
    return KnowledgeBase(raw={"content": sections})


class TestExcerptSearch(unittest.TestCase):
    def test_short_text_excerpt_is_whole_text(self):
        kb = _kb(faq={"content": "Bambi is a hypnosis persona.", "full_length": 27})
        out = search(kb, "hypnosis", section="faq")
        self.assertEqual(out.total_found, 1)
        hit = out.results[0]
        self.assertEqual(hit.section, "faq")
        self.assertEqual(hit.relevance, 0.9)
        self.assertEqual(hit.excerpt, "...Bambi is a hypnosis persona....")
        self.assertEqual(hit.full_length, 27)

    def test_case_insensitive_keeps_original_case(self):
        kb = _kb(faq={"content": "Read the SAFETY notes first."})
        hit = search(kb, "safety").results[0]
        self.assertIn("SAFETY", hit.excerpt)

    def test_one_hit_per_section_around_first_match(self):
        text = "x" * 300 + "needle" + "y" * 300 + "needle" + "z" * 300
        kb = _kb(sessions={"content": text})
        out = search(kb, "needle")
        self.assertEqual(out.total_found, 1)
        excerpt = out.results[0].excerpt
        self.assertEqual(excerpt, "..." + "x" * 100 + "needle" + "y" * 100 + "...")

    def test_window_clamps_at_start(self):
        text = "needle" + "a" * 500
        self.assertEqual(excerpt_window(text, 0, 6), "needle" + "a" * 100)

    def test_window_clamps_at_end(self):
        text = "a" * 500 + "needle"
        self.assertEqual(excerpt_window(text, 500, 6), "a" * 100 + "needle")

    def test_preserves_section_order_and_truncates(self):
        kb = _kb(
            faq={"content": "trigger one"},
            sessions={"content": "nothing here"},
            triggers={"content": "Trigger two"},
            safety={"content": "a trigger three"},
        )
        out = search(kb, "trigger", max_results=2)
        self.assertEqual([h.section for h in out.results], ["faq", "triggers"])
        self.assertEqual(out.total_found, 3)

    def test_named_section_only(self):
        kb = _kb(faq={"content": "trigger"}, triggers={"content": "trigger"})
        out = search(kb, "trigger", section="triggers")
        self.assertEqual([h.section for h in out.results], ["triggers"])

    def test_missing_section_finds_nothing(self):
        kb = _kb(faq={"content": "trigger"})
        out = search(kb, "trigger", section="transcripts")
        self.assertEqual(out.results, [])
        self.assertEqual(out.total_found, 0)

    def test_empty_query_matches_non_empty_sections(self):
        kb = _kb(faq={"content": "abc"}, safety={"content": ""}, triggers={})
        out = search(kb, "")
        self.assertEqual([h.section for h in out.results], ["faq"])

    def test_full_length_falls_back_to_text_length(self):
        kb = _kb(faq={"content": "hello world"})
        self.assertEqual(search(kb, "world").results[0].full_length, 11)

    def test_sentinel_document_is_empty(self):
        kb = KnowledgeBase(raw={"error": "Data not available"})
        out = search(kb, "anything")
        self.assertEqual(out.total_found, 0)


if __name__ == "__main__":
    unittest.main()
