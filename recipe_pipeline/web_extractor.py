"""
Recipe extraction from web pages with a tiered fallback strategy.

This module fetches a recipe URL and converts the page into a RecipeDraft.
Tiers are tried in order and the first one that yields content wins:
1. schema.org Recipe objects embedded as JSON-LD
2. recipe-scrapers site scrapers (for hosts the library supports)
3. Common CSS selectors for ingredient and instruction lists
4. Block heuristics over the page's main content
"""

import json
import logging
from typing import Any, Callable, Optional
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup
from recipe_scrapers import SCRAPERS, scrape_html

from recipe_pipeline.heuristics import is_ingredient_block, is_instruction_block
from recipe_pipeline.ingredient_parser import parse_ingredient_with_comment
from recipe_pipeline.recipe import FieldKind, Recipe, RecipeDraft
from recipe_pipeline.utils import normalize_whitespace

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], tuple[int, bytes]]

# ==============================================================================
# CONFIGURATION
# ==============================================================================

REQUEST_TIMEOUT = 20

DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; RecipePipeline/1.0)",
    "Accept": "text/html,application/xhtml+xml",
}

SOURCE_TYPE_WEBSITE = "website"

DEFAULT_TITLE = "Untitled Recipe"

RECIPE_TYPES = ("Recipe", "schema:Recipe")

INGREDIENT_SELECTORS = [
    "ul.ingredients li",
    "div.ingredients li",
    ".recipe-ingredients li",
    "[itemprop='recipeIngredient']",
    ".ingredient-list li",
]

INSTRUCTION_SELECTORS = [
    "ol.instructions li",
    "div.instructions li",
    ".recipe-directions li",
    "[itemprop='recipeInstructions']",
    ".preparation-steps li",
    ".recipe-method li",
]

SERVINGS_SELECTORS = ["[itemprop='recipeYield']", ".recipe-yield", ".recipe-servings"]

AUTHOR_SELECTORS = ["[itemprop='author']", ".recipe-author", ".byline"]

NON_CONTENT_SELECTOR = "header, footer, nav, aside, .sidebar, .comments, script, style"

MAIN_CONTENT_SELECTOR = "main, article, .content, .post, .recipe, .entry, .post-content"

TEXT_BLOCK_SELECTOR = "p, li, div:not(:has(*))"

MIN_TEXT_BLOCK_LENGTH = 10


# ==============================================================================
# ERRORS
# ==============================================================================

class ExtractionError(Exception):
    """Base class for web extraction failures."""

    default_message = "Recipe extraction failed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)


class InvalidURLError(ExtractionError):
    default_message = "The URL provided is invalid"


class NetworkError(ExtractionError):
    default_message = "Network error"

    def __init__(self, cause: Any = None):
        self.cause = cause
        message = f"{self.default_message}: {cause}" if cause else self.default_message
        super().__init__(message)


class ParsingFailedError(ExtractionError):
    default_message = "Parsing failed"

    def __init__(self, reason: str = ""):
        self.reason = reason
        super().__init__(f"{self.default_message}: {reason}" if reason else self.default_message)


class NoRecipeFoundError(ExtractionError):
    default_message = "No recipe could be found on this page"


# ==============================================================================
# FETCHING
# ==============================================================================

def validate_url(url: str) -> str:
    """
    Check that a URL is an absolute http(s) URL.

    Raises:
        InvalidURLError: If the scheme or host is missing
    """
    if not url or not url.strip():
        raise InvalidURLError()

    url = url.strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidURLError(f"The URL provided is invalid: {url}")
    return url


def requests_fetcher(url: str) -> tuple[int, bytes]:
    """Single GET with a timeout and no retries."""
    response = requests.get(url, headers=DEFAULT_HEADERS, timeout=REQUEST_TIMEOUT)
    return response.status_code, response.content


def fetch_html(url: str, fetcher: Optional[Fetcher] = None) -> str:
    """
    Fetch a page and decode it as UTF-8.

    Args:
        url: Page URL
        fetcher: Callable returning (status_code, body_bytes); defaults to requests

    Returns:
        Decoded HTML

    Raises:
        NetworkError: On transport failure or a non-2xx status
        ParsingFailedError: If the body is not valid UTF-8
    """
    fetcher = fetcher or requests_fetcher

    logger.info(f"Fetching {url}")
    try:
        status, body = fetcher(url)
    except (requests.RequestException, OSError) as e:
        raise NetworkError(e) from e

    if not 200 <= status <= 299:
        raise NetworkError(f"HTTP {status}")

    try:
        return body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ParsingFailedError("Unable to convert data to string") from e


# ==============================================================================
# HELPER FUNCTIONS
# ==============================================================================

def _is_recipe_type(value: Any) -> bool:
    if isinstance(value, str):
        return value in RECIPE_TYPES
    if isinstance(value, list):
        return any(item in RECIPE_TYPES for item in value if isinstance(item, str))
    return False


def _as_text_list(value: Any) -> list[str]:
    """Normalize a scalar-or-list JSON value to a list of non-empty strings."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value.strip()] if value.strip() else []
    if isinstance(value, list):
        return [str(item).strip() for item in value if item is not None and str(item).strip()]
    return [str(value)]


def _flatten_instructions(value: Any) -> list[str]:
    """
    Flatten recipeInstructions into step strings.

    Handles plain strings, HowToStep objects with "text", HowToSection
    objects whose steps live under "itemListElement", and lists of any mix.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return [value.strip()] if value.strip() else []
    if isinstance(value, list):
        steps = []
        for item in value:
            steps.extend(_flatten_instructions(item))
        return steps
    if isinstance(value, dict):
        if "itemListElement" in value:
            return _flatten_instructions(value["itemListElement"])
        text = value.get("text") or value.get("name")
        if isinstance(text, str) and text.strip():
            return [text.strip()]
    return []


def _name_of(value: Any) -> Optional[str]:
    """Name of a schema.org Person/Organization given as object, string or list."""
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, dict):
        name = value.get("name")
        return name.strip() if isinstance(name, str) and name.strip() else None
    if isinstance(value, list):
        for item in value:
            name = _name_of(item)
            if name:
                return name
    return None


def _yield_text(value: Any) -> Optional[str]:
    if isinstance(value, list):
        for item in value:
            text = _yield_text(item)
            if text:
                return text
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(int(value)) if float(value).is_integer() else str(value)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _select_texts(soup: BeautifulSoup, selector: str) -> list[str]:
    texts = []
    for element in soup.select(selector):
        text = normalize_whitespace(element.get_text(separator=' '))
        if text:
            texts.append(text)
    return texts


def _first_selected_text(soup: BeautifulSoup, selectors: list[str]) -> Optional[str]:
    for selector in selectors:
        element = soup.select_one(selector)
        if element:
            text = normalize_whitespace(element.get_text(separator=' '))
            if text:
                return text
    return None


def _meta_content(soup: BeautifulSoup, **attrs) -> str:
    tag = soup.find("meta", attrs=attrs)
    if tag and tag.get("content"):
        return tag["content"].strip()
    return ""


def build_raw_text(draft: RecipeDraft, source_url: str, summary_label: str = "SUMMARY") -> list[str]:
    """Transcript of what was extracted, kept on the draft for reference."""
    raw_text = [f"TITLE: {draft.title}"]
    raw_text.extend(f"{summary_label}: {summary}" for summary in draft.summary)
    raw_text.append("INGREDIENTS:")
    raw_text.extend(draft.ingredients)
    raw_text.append("INSTRUCTIONS:")
    raw_text.extend(draft.instructions)
    raw_text.extend(f"TIMING: {timing}" for timing in draft.timings)
    raw_text.extend(f"SERVINGS: {serving}" for serving in draft.servings)
    raw_text.append(f"SOURCE URL: {source_url}")
    return raw_text


# ==============================================================================
# TIER 1: JSON-LD STRUCTURED DATA
# ==============================================================================

def find_json_ld_recipe(soup: BeautifulSoup) -> Optional[dict]:
    """
    Find the first schema.org Recipe object in the page's JSON-LD scripts.

    Looks at top-level objects, top-level lists and "@graph" arrays.
    """
    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        raw = script.string or script.get_text()
        if not raw or not raw.strip():
            continue

        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.debug(f"Skipping malformed JSON-LD block: {e}")
            continue

        candidates = data if isinstance(data, list) else [data]
        for candidate in candidates:
            if not isinstance(candidate, dict):
                continue
            if _is_recipe_type(candidate.get("@type")):
                return candidate
            graph = candidate.get("@graph")
            if isinstance(graph, list):
                for item in graph:
                    if isinstance(item, dict) and _is_recipe_type(item.get("@type")):
                        return item
    return None


def draft_from_json_ld(data: dict, source_url: str) -> RecipeDraft:
    """Build a draft from a schema.org Recipe object."""
    name = data.get("name")
    draft = RecipeDraft(
        title=name.strip() if isinstance(name, str) and name.strip() else DEFAULT_TITLE,
        source=source_url,
        website=source_url,
        source_type=SOURCE_TYPE_WEBSITE,
    )

    description = data.get("description")
    if isinstance(description, str) and description.strip():
        draft.fields[FieldKind.SUMMARY] = [description.strip()]

    draft.fields[FieldKind.INGREDIENTS] = _as_text_list(data.get("recipeIngredient"))
    draft.fields[FieldKind.INSTRUCTIONS] = _flatten_instructions(data.get("recipeInstructions"))

    for key, label in (("prepTime", "prep"), ("cookTime", "cook"), ("totalTime", "total")):
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            draft.timings.append(f"{label}: {value.strip()}")

    servings = _yield_text(data.get("recipeYield"))
    if servings:
        draft.servings.append(servings)

    draft.author = _name_of(data.get("author"))
    draft.source_title = _name_of(data.get("publisher"))

    draft.raw_text = build_raw_text(draft, source_url)
    return draft


def extract_structured_data(soup: BeautifulSoup, source_url: str) -> Optional[RecipeDraft]:
    """
    Tier 1: read the page's JSON-LD Recipe.

    Returns:
        RecipeDraft, or None if there is no Recipe object with content
    """
    data = find_json_ld_recipe(soup)
    if data is None:
        logger.debug("No JSON-LD Recipe found")
        return None

    draft = draft_from_json_ld(data, source_url)
    if not draft.ingredients and not draft.instructions:
        logger.warning("JSON-LD Recipe has no ingredients or instructions")
        return None

    logger.info(f"JSON-LD extraction successful: {len(draft.ingredients)} ingredients, "
                f"{len(draft.instructions)} instructions")
    return draft


# ==============================================================================
# TIER 2: recipe-scrapers SITE SCRAPERS
# ==============================================================================

def _safe_scraper_call(method):
    """Call a scraper accessor, treating unimplemented fields as missing."""
    try:
        return method()
    except Exception:
        return None


def is_supported_site(source_url: str) -> bool:
    host = urlparse(source_url).netloc.lower()
    if host.startswith("www."):
        host = host[4:]
    return host in SCRAPERS


def try_recipe_scrapers(html: str, source_url: str) -> Optional[tuple[list[str], list[str]]]:
    """
    Tier 2: run the recipe-scrapers scraper for a supported host.

    Returns:
        Tuple of (ingredients, instructions), or None if the host is not
        supported or the scraper found nothing
    """
    if not is_supported_site(source_url):
        logger.debug(f"recipe-scrapers has no scraper for {source_url}")
        return None

    try:
        logger.info(f"Attempting recipe-scrapers extraction from {source_url}")
        scraper = scrape_html(html=html, org_url=source_url)
        ingredients = _safe_scraper_call(scraper.ingredients) or []
        instructions = _safe_scraper_call(scraper.instructions_list) or []
    except Exception as e:
        logger.warning(f"recipe-scrapers extraction failed: {e}")
        return None

    if not ingredients and not instructions:
        logger.warning("recipe-scrapers returned empty ingredients and instructions")
        return None

    logger.info(f"recipe-scrapers extraction successful: {len(ingredients)} ingredients, "
                f"{len(instructions)} instructions")
    return list(ingredients), list(instructions)


# ==============================================================================
# TIER 3/4: HTML PATTERNS AND BLOCK HEURISTICS
# ==============================================================================

def extract_by_selectors(soup: BeautifulSoup, selectors: list[str]) -> list[str]:
    """Texts of the first selector that matches anything non-empty."""
    for selector in selectors:
        texts = _select_texts(soup, selector)
        if texts:
            logger.debug(f"Selector '{selector}' matched {len(texts)} elements")
            return texts
    return []


def smart_text_extraction(soup: BeautifulSoup) -> list[str]:
    """
    Collect candidate text blocks from the page's main content.

    Navigation, sidebars and comments are removed from the soup first, so
    call this after any metadata has been read.
    """
    for element in soup.select(NON_CONTENT_SELECTOR):
        element.decompose()

    main_content = soup.select_one(MAIN_CONTENT_SELECTOR) or soup

    blocks = []
    for element in main_content.select(TEXT_BLOCK_SELECTOR):
        text = normalize_whitespace(element.get_text(separator=' '))
        if len(text) > MIN_TEXT_BLOCK_LENGTH:
            blocks.append(text)
    return blocks


def identify_ingredients(blocks: list[str]) -> list[str]:
    return [block for block in blocks if is_ingredient_block(block)]


def identify_instructions(blocks: list[str]) -> list[str]:
    return [block for block in blocks if is_instruction_block(block)]


def extract_from_html_patterns(soup: BeautifulSoup, html: str, source_url: str) -> RecipeDraft:
    """
    Tiers 2-4: build a draft from page structure when there is no JSON-LD.

    Raises:
        NoRecipeFoundError: If no tier finds ingredients or instructions
    """
    draft = RecipeDraft(source=source_url, website=source_url, source_type=SOURCE_TYPE_WEBSITE)

    # Metadata first; block extraction removes parts of the page
    h1 = soup.find("h1")
    title = normalize_whitespace(h1.get_text(separator=' ')) if h1 else ""
    if not title:
        title = _meta_content(soup, property="og:title")
    if not title and soup.title and soup.title.string:
        title = soup.title.string.strip()
    draft.title = title

    description = _meta_content(soup, name="description")
    if description:
        draft.summary.append(description)

    servings = _first_selected_text(soup, SERVINGS_SELECTORS)
    if servings:
        draft.servings.append(servings)

    draft.author = _first_selected_text(soup, AUTHOR_SELECTORS)
    draft.source_title = _meta_content(soup, property="og:site_name") or None

    ingredients: list[str] = []
    instructions: list[str] = []

    scraped = try_recipe_scrapers(html, source_url)
    if scraped:
        ingredients, instructions = scraped

    if not ingredients:
        ingredients = extract_by_selectors(soup, INGREDIENT_SELECTORS)
    if not instructions:
        instructions = extract_by_selectors(soup, INSTRUCTION_SELECTORS)

    if not ingredients or not instructions:
        blocks = smart_text_extraction(soup)
        logger.debug(f"Block extraction found {len(blocks)} text blocks")
        if not ingredients:
            ingredients = identify_ingredients(blocks)
        if not instructions:
            instructions = identify_instructions(blocks)

    if not ingredients and not instructions:
        raise NoRecipeFoundError()

    draft.fields[FieldKind.INGREDIENTS] = ingredients
    draft.fields[FieldKind.INSTRUCTIONS] = instructions
    draft.raw_text = build_raw_text(draft, source_url, summary_label="DESCRIPTION")

    logger.info(f"HTML pattern extraction: {len(ingredients)} ingredients, "
                f"{len(instructions)} instructions")
    return draft


# ==============================================================================
# MAIN EXTRACTION FUNCTIONS
# ==============================================================================

def parse_recipe_html(html: str, source_url: str) -> RecipeDraft:
    """
    Parse a recipe page, preferring JSON-LD over any DOM heuristics.

    Args:
        html: Page HTML
        source_url: URL the page was fetched from

    Returns:
        RecipeDraft

    Raises:
        ParsingFailedError: If the HTML cannot be parsed
        NoRecipeFoundError: If no tier finds recipe content
    """
    try:
        soup = BeautifulSoup(html, "html.parser")
    except Exception as e:
        raise ParsingFailedError(str(e)) from e

    draft = extract_structured_data(soup, source_url)
    if draft:
        return draft

    return extract_from_html_patterns(soup, html, source_url)


def extract_draft(url: str, fetcher: Optional[Fetcher] = None) -> RecipeDraft:
    """Validate, fetch and parse a recipe URL into a draft."""
    url = validate_url(url)
    html = fetch_html(url, fetcher)
    return parse_recipe_html(html, url)


def extract_recipe(url: str, fetcher: Optional[Fetcher] = None) -> Recipe:
    """
    Extract a finished Recipe from a web page.

    Ingredient strings are parsed with trailing comments split off
    ("2 cups flour, sifted").

    Args:
        url: Recipe page URL
        fetcher: Optional (url) -> (status_code, body_bytes) callable

    Returns:
        Recipe

    Raises:
        ExtractionError: Any of InvalidURLError, NetworkError,
            ParsingFailedError or NoRecipeFoundError
    """
    draft = extract_draft(url, fetcher)
    return draft.to_recipe(ingredient_parser=parse_ingredient_with_comment)
