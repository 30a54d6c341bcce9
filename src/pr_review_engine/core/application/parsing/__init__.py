from pr_review_engine.core.application.parsing.markup_escaping import escape_markup, unescape_markup
from pr_review_engine.core.application.parsing.xml_review_parser import XmlReviewResponseParser

__all__ = ["XmlReviewResponseParser", "escape_markup", "unescape_markup"]
