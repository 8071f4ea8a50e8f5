import re
import pytest

from resume_hub.helpers.text import normalize_text, tokenize, split_sentences, non_empty_lines

SAMPLES = [
    "",
    "   ",
    "Hello, World!",
    "C++ / C# -- Node.js;   React\t\tDjango\n\nPython_3",
    "Émilie Dupont — Senior Engineer (Zürich)",
    "email: jane.doe@example.com | phone: +1 (555) 123-4567",
    "!!!???...",
]

class TestNormalizeText:
    """Normalizer output alphabet and whitespace handling"""

    @pytest.mark.parametrize("text", SAMPLES)
    def test_output_alphabet(self, text):
        """Only [a-z0-9 ] and never a double space"""
        out = normalize_text(text)
        assert re.fullmatch(r"[a-z0-9 ]*", out)
        assert "  " not in out
        assert out == out.strip()

    def test_empty_in_empty_out(self):
        assert normalize_text("") == ""
        assert normalize_text(None) == ""

    def test_collapses_punctuation_and_case(self):
        assert normalize_text("  Hello,   WORLD!! ") == "hello world"
        assert normalize_text("Node.js") == "node js"

class TestTokenizeAndSentences:
    """Token and sentence helpers"""

    def test_tokenize(self):
        assert tokenize("Who knows Go?") == ["who", "knows", "go"]
        assert tokenize("...") == []

    def test_split_sentences(self):
        text = "I write Python. I also know React! Do I know Go? Maybe"
        assert split_sentences(text) == [
            "I write Python", "I also know React", "Do I know Go", "Maybe"
        ]

    def test_split_sentences_keeps_dotted_names(self):
        assert split_sentences("Built APIs in Node.js and Vue.js. Shipped fast.") == [
            "Built APIs in Node.js and Vue.js", "Shipped fast."
        ]

    def test_non_empty_lines(self):
        assert non_empty_lines("\n  Jane Doe \n\n Engineer\n") == ["Jane Doe", "Engineer"]
