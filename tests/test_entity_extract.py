import unittest

from toolshed.graph.extract import Entity, dedupe, extract, extract_entities
from toolshed.kb.store import KnowledgeBase


class TestEntityExtract(unittest.TestCase):
    def test_vocabulary_then_word_pairs(self):
        text = "Listen to Session 12 and File 3. Good Girl is a Trigger."
        names = [e.entity for e in extract_entities(text, source="faq")]
        self.assertEqual(names, ["Session 12", "File 3", "Trigger", "Good Girl"])

    def test_vocabulary_is_case_insensitive(self):
        names = [e.entity for e in extract_entities("bambi and BAMBI and session 4", source="faq")]
        self.assertEqual(names, ["bambi", "BAMBI", "session 4"])

    def test_word_pairs_are_case_sensitive(self):
        names = [e.entity for e in extract_entities("carl jung and CARL JUNG", source="faq")]
        self.assertEqual(names, [])

    def test_passes_are_independent(self):
        # "Bambi Sleep" matches the pair pattern even though "Bambi" was already taken by the vocabulary.
        names = [e.entity for e in extract_entities("Bambi Sleep", source="faq")]
        self.assertEqual(names, ["Bambi", "Bambi Sleep"])

    def test_entity_shape(self):
        e = extract_entities("Bambi", source="safety")[0]
        self.assertEqual(e.to_dict(), {"entity": "Bambi", "type": "extracted", "source": "safety"})

    def test_dedupe_last_wins_first_position(self):
        ents = [
            Entity("Bambi", "extracted", "faq"),
            Entity("Trigger", "extracted", "faq"),
            Entity("Bambi", "extracted", "safety"),
        ]
        out = dedupe(ents)
        self.assertEqual([e.entity for e in out], ["Bambi", "Trigger"])
        self.assertEqual(out[0].source, "safety")

    def test_duplicate_across_sections_keeps_last_source(self):
        kb = KnowledgeBase(raw={"content": {"faq": {"content": "Bambi"}, "safety": {"content": "Bambi"}}})
        out = extract(kb, "all")
        self.assertEqual(out.total_extracted, 1)
        self.assertEqual(out.entities[0].source, "safety")

    def test_caps_output_at_fifty(self):
        text = " ".join(f"Session {i}" for i in range(80))
        kb = KnowledgeBase(raw={"content": {"sessions": {"content": text}}})
        out = extract(kb, "sessions")
        self.assertEqual(len(out.entities), 50)
        self.assertEqual(out.total_extracted, 80)

    def test_unknown_section_is_empty(self):
        kb = KnowledgeBase(raw={"content": {"faq": {"content": "Bambi"}}})
        out = extract(kb, "triggers")
        self.assertEqual(out.entities, [])
        self.assertEqual(out.total_extracted, 0)


if __name__ == "__main__":
    unittest.main()
