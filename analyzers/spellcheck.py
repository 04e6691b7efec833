"""
Lightweight spell checker for page copy.

No dictionary lookup: a word is flagged only when it appears in a table of
common misspellings or matches a suspicious pattern (a letter tripled,
known bad prefixes). Brand names, acronyms and units are ignored.
"""
from __future__ import annotations

import html as html_lib
import re
from typing import Iterable, Optional

from config import MAX_SPELLING_ERRORS
from models import SpellingError


IGNORE_WORDS = frozenset("""
    api url urls html css javascript js json xml php sql http https www
    npm cdn cli gui svg png jpg jpeg gif pdf ai ui ux ios android
    seo saas crm cms erp roi cta faq faqs ebook ebooks ecommerce blockchain
    cryptocurrency bitcoin ethereum wifi webinar podcast podcasts linkedin facebook
    twitter instagram youtube tiktok pinterest whatsapp gmail google microsoft apple
    amazon wordpress shopify wix squarespace hubspot salesforce mailchimp stripe paypal
    venmo uber airbnb netflix spotify zoom slack trello asana figma canva
    inc llc ltd corp co vs etc eg ie dr mr mrs ms jr sr st ave
    blvd rd ct fl ca ny tx usa uk
    1st 2nd 3rd 4th 5th 10x 24x7 247 kb mb gb tb px em rem
""".split())

COMMON_MISSPELLINGS: dict[str, list[str]] = {
    "accomodate": ["accommodate"], "acheive": ["achieve"], "accross": ["across"],
    "agressive": ["aggressive"], "apparant": ["apparent"], "arguement": ["argument"],
    "begining": ["beginning"], "beleive": ["believe"], "buisness": ["business"],
    "calender": ["calendar"], "catagory": ["category"], "commited": ["committed"],
    "concious": ["conscious"], "definately": ["definitely"], "dissapoint": ["disappoint"],
    "embarass": ["embarrass"], "enviroment": ["environment"], "existance": ["existence"],
    "foriegn": ["foreign"], "fourty": ["forty"], "goverment": ["government"],
    "grammer": ["grammar"], "guarentee": ["guarantee"], "harrass": ["harass"],
    "immediatly": ["immediately"], "independant": ["independent"], "knowlege": ["knowledge"],
    "liason": ["liaison"], "maintainance": ["maintenance"], "millenium": ["millennium"],
    "neccessary": ["necessary"], "noticable": ["noticeable"], "occassion": ["occasion"],
    "occured": ["occurred"], "occurence": ["occurrence"], "persistant": ["persistent"],
    "posession": ["possession"], "prefered": ["preferred"], "priviledge": ["privilege"],
    "publically": ["publicly"], "recieve": ["receive"], "recomend": ["recommend"],
    "refered": ["referred"], "relevent": ["relevant"], "seperate": ["separate"],
    "sieze": ["seize"], "sucessful": ["successful"], "supercede": ["supersede"],
    "suprise": ["surprise"], "thier": ["their"], "tommorow": ["tomorrow"],
    "truely": ["truly"], "untill": ["until"], "wierd": ["weird"], "writting": ["writing"],
    # web copy
    "cancle": ["cancel"], "submitt": ["submit"], "dowload": ["download"],
    "upgrage": ["upgrade"], "subscibe": ["subscribe"], "unsubscibe": ["unsubscribe"],
    "contant": ["contact", "content"], "serach": ["search"], "prodcut": ["product"],
    "shoping": ["shopping"], "checkut": ["checkout"], "acount": ["account"],
    "pasword": ["password"], "registeration": ["registration"],
    "avaliable": ["available"], "availble": ["available"],
}

MIN_WORD_LENGTH = 4
MAX_SUGGESTIONS = 3
CONTEXT_CHARS = 30

_URL = re.compile(r"https?://\S+")
_EMAIL = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
_TAG = re.compile(r"<[^>]+>")
_TEMPLATE = re.compile(r"\{[^}]+\}")
_DIGITS = re.compile(r"[0-9]+")
_SENTENCE_END = re.compile(r"[.!?]+")
_WORD = re.compile(r"\b[a-zA-Z]+\b")
_TRIPLE = re.compile(r"(.)\1\1")

_DROP_BLOCKS = re.compile(r"<(script|style|noscript)[^>]*>.*?</\1>", re.IGNORECASE | re.DOTALL)
_ENTITY = re.compile(r"&[a-z]+;", re.IGNORECASE)


class SpellChecker:
    def __init__(self, custom_words: Iterable[str] = ()):
        self.ignore_words = set(IGNORE_WORDS) | {w.lower() for w in custom_words}
        self.custom_dictionary: set[str] = set()

    def add_to_custom_dictionary(self, words: Iterable[str]) -> None:
        self.custom_dictionary.update(w.lower() for w in words)

    def check_text(self, text: str, page_url: Optional[str] = None) -> list[SpellingError]:
        errors: list[SpellingError] = []

        for word, context in self._extract_words(text):
            lower = word.lower()
            if lower in self.ignore_words or lower in self.custom_dictionary:
                continue

            suggestions = COMMON_MISSPELLINGS.get(lower) or self._suspicious(lower)
            if suggestions:
                errors.append(SpellingError(
                    word=word,
                    suggestions=suggestions[:MAX_SUGGESTIONS],
                    context=context,
                    page_url=page_url,
                ))

        return errors

    def _extract_words(self, text: str) -> list[tuple[str, str]]:
        cleaned = _URL.sub("", text)
        cleaned = _EMAIL.sub("", cleaned)
        cleaned = _TAG.sub("", cleaned)
        cleaned = _TEMPLATE.sub("", cleaned)
        cleaned = _DIGITS.sub(" ", cleaned)

        results: list[tuple[str, str]] = []
        for sentence in filter(None, _SENTENCE_END.split(cleaned)):
            for word in _WORD.findall(sentence):
                if len(word) < MIN_WORD_LENGTH:
                    continue
                pos = sentence.find(word)
                start = max(0, pos - CONTEXT_CHARS)
                end = min(len(sentence), pos + len(word) + CONTEXT_CHARS)
                results.append((word, sentence[start:end].strip()))
        return results

    @staticmethod
    def _suspicious(lower: str) -> Optional[list[str]]:
        if _TRIPLE.search(lower):
            return [_TRIPLE.sub(r"\1\1", lower)]
        if lower.startswith("unnecc"):
            return ["unnecessary"]
        if lower.startswith("dissapp"):
            return ["disappoint", "disappear"]
        return None

    @staticmethod
    def extract_text_from_html(html: str) -> str:
        text = _DROP_BLOCKS.sub("", html)
        text = _TAG.sub(" ", text)
        text = html_lib.unescape(text.replace("&nbsp;", " "))
        text = _ENTITY.sub(" ", text)
        return re.sub(r"\s+", " ", text).strip()


def check_spelling(
    html: str,
    custom_words: Iterable[str] = (),
    page_url: Optional[str] = None,
) -> list[SpellingError]:
    """Spelling errors found in the visible text of an HTML document, capped."""
    checker = SpellChecker(custom_words)
    text = checker.extract_text_from_html(html)
    return checker.check_text(text, page_url)[:MAX_SPELLING_ERRORS]
