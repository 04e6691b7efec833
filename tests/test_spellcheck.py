"""
Tests for the spell checker
"""
from analyzers.spellcheck import SpellChecker, check_spelling


class TestSpellChecker:
    def test_common_misspelling(self):
        errors = check_spelling("<p>We recieve orders daily.</p>")

        assert len(errors) == 1
        assert errors[0].word == "recieve"
        assert errors[0].suggestions == ["receive"]
        assert "recieve" in errors[0].context

    def test_tripled_letter(self):
        errors = check_spelling("<p>This is sooo good.</p>")
        assert errors[0].suggestions == ["soo"]

    def test_clean_copy(self):
        assert check_spelling("<p>We deliver fresh bread every morning.</p>") == []

    def test_ignores_scripts_urls_and_emails(self):
        html = (
            "<script>var definately = 1;</script>"
            "<p>Visit https://acme.test/recieve or mail thier@acme.test</p>"
        )
        assert check_spelling(html) == []

    def test_custom_words(self):
        assert check_spelling("<p>Seperate pricing.</p>", custom_words=["seperate"]) == []

    def test_page_url_attached(self):
        errors = check_spelling("<p>Wierd.</p>", page_url="https://acme.test/")
        assert errors[0].page_url == "https://acme.test/"

    def test_capped(self):
        html = "<p>" + " ".join(["recieve."] * 40) + "</p>"
        assert len(check_spelling(html)) == 20

    def test_extract_text_unescapes_entities(self):
        text = SpellChecker.extract_text_from_html("<p>Fish&nbsp;&amp;&nbsp;Chips</p>")
        assert text == "Fish & Chips"
