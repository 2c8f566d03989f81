import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass

from bs4 import Tag
from soupsieve import SelectorSyntaxError

from job_harvester.heuristics import FIELD_PATTERNS, PatternKind

logger = logging.getLogger(__name__)

MAX_FIELD_LENGTH = 200
MIN_PATTERN_LENGTH = 2
PATTERN_TAGS = ["p", "span", "div", "h1", "h2", "h3", "h4", "h5", "li"]
HEADING_TAGS = {"h1", "h2", "h3", "h4", "h5"}
DATA_ID_ATTRIBUTE = "data-testid"


def element_text(element: Tag) -> str:
    """Text content of an element with whitespace collapsed."""
    return " ".join(element.get_text(" ").split())


class Matcher(ABC):
    """One strategy of a field cascade."""

    @abstractmethod
    def match(self, root: Tag) -> str:
        """Return the matched text, or "" when nothing matches."""


class SelectorMatcher(Matcher):
    """First element with non-empty text among the matches of each selector, in order."""

    def __init__(self, selectors: tuple[str, ...]):
        self.selectors = selectors

    def match(self, root: Tag) -> str:
        for selector in self.selectors:
            try:
                elements = root.select(selector)
            except SelectorSyntaxError as e:
                logger.debug(f"Skipping invalid selector '{selector}': {e}")
                continue
            for element in elements:
                text = element_text(element)
                if text:
                    return text
        return ""


class AttributeKeywordMatcher(Matcher):
    """
    Looks for descendants whose class list, id or data-testid contains one of
    the keyword tokens derived from the candidate selectors
    (e.g. ".job-title" -> "jobtitle").
    """

    def __init__(self, selectors: tuple[str, ...]):
        self.keywords = self.derive_keywords(selectors)

    @staticmethod
    def derive_keywords(selectors: tuple[str, ...]) -> list[str]:
        keywords: list[str] = []
        for selector in selectors:
            token = re.sub(r"[^a-zA-Z0-9]", "", selector).lower()
            # Single characters would match nearly every class name
            if len(token) >= 2 and token not in keywords:
                keywords.append(token)
        return keywords

    def match(self, root: Tag) -> str:
        if not self.keywords:
            return ""

        for element in root.find_all(True):
            text = element_text(element)
            if not text or len(text) >= MAX_FIELD_LENGTH:
                continue

            class_attr = element.get("class") or []
            if isinstance(class_attr, str):
                class_attr = [class_attr]
            haystacks = [
                " ".join(class_attr).lower(),
                str(element.get("id") or "").lower(),
                str(element.get(DATA_ID_ATTRIBUTE) or "").lower(),
            ]
            if any(kw in haystack for kw in self.keywords for haystack in haystacks if haystack):
                return text
        return ""


class PatternMatcher(Matcher):
    """Innermost short text blocks whose content has the shape of the field's values."""

    def __init__(self, kind: PatternKind):
        self.kind = kind

    def match(self, root: Tag) -> str:
        candidates: list[tuple[Tag, str]] = []
        for element in root.find_all(PATTERN_TAGS):
            text = element_text(element)
            if MIN_PATTERN_LENGTH <= len(text) <= MAX_FIELD_LENGTH and FIELD_PATTERNS.matches(
                self.kind, text
            ):
                candidates.append((element, text))

        if not candidates:
            return ""

        # A wrapper matches whenever one of its children does; keep the innermost
        containers = {id(parent) for element, _ in candidates for parent in element.parents}
        candidates = [(el, text) for el, text in candidates if id(el) not in containers]

        if self.kind is PatternKind.TITLE:
            for element, text in candidates:
                if element.name in HEADING_TAGS:
                    return text

        return candidates[0][1]


@dataclass(frozen=True)
class FieldSpec:
    """Candidate selectors for one logical field plus its optional text pattern family."""

    name: str
    selectors: tuple[str, ...]
    kind: PatternKind | None = None

    def matchers(self) -> list[Matcher]:
        matchers: list[Matcher] = [
            SelectorMatcher(self.selectors),
            AttributeKeywordMatcher(self.selectors),
        ]
        if self.kind is not None:
            matchers.append(PatternMatcher(self.kind))
        return matchers


def resolve_field(root: Tag, spec: FieldSpec) -> str:
    """
    Resolve one field from `root`, returning the first non-empty match of the
    cascade or "" when every strategy misses. Never raises.

    The cascade tries the field's selectors, then class/id/data-testid keywords
    derived from them, then text that has the shape of the field.
    """
    for matcher in spec.matchers():
        try:
            value = matcher.match(root)
        except Exception as e:
            logger.debug(f"{type(matcher).__name__} failed for field '{spec.name}': {e}")
            continue
        if value:
            return value
    return ""
