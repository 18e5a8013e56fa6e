from .constants import ALLOWED_ATTRIBUTES, ALLOWED_TAGS, TAG_FLAGS, TagFlags
from .sanitize import DEFAULT_POLICY, DEFAULT_URL_RULE, SafetyPolicy, UrlRule, is_safe, is_safe_url
from .scanner import StringScanner
from .serialize import escape_tag, filter_html, to_html
from .tokenizer import RecognizerOpts, TagRecognizer, recognize, recognize_from
from .tokens import Attributes, HtmlTag, ParseError

__version__ = "0.1.0"

__all__ = [
    "ALLOWED_ATTRIBUTES",
    "ALLOWED_TAGS",
    "DEFAULT_POLICY",
    "DEFAULT_URL_RULE",
    "TAG_FLAGS",
    "Attributes",
    "HtmlTag",
    "ParseError",
    "RecognizerOpts",
    "SafetyPolicy",
    "StringScanner",
    "TagFlags",
    "TagRecognizer",
    "UrlRule",
    "escape_tag",
    "filter_html",
    "is_safe",
    "is_safe_url",
    "recognize",
    "recognize_from",
    "to_html",
]
