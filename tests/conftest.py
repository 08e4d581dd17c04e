"""Pytest configuration and fixtures."""

import json

import pytest

from recipe_pipeline.classifier import RecipeTextClassifier, RuleBasedLineModel


class StubLineModel:
    """Line model that answers from a fixed text -> (label, confidence) table."""

    def __init__(self, labels=None, default=("unknown", 0.0)):
        self.labels = labels or {}
        self.default = default
        self.calls = []

    def classify(self, text):
        self.calls.append(text)
        return self.labels.get(text, self.default)


COOKIE_LINES = [
    "CHOCOLATE CHIP COOKIES",
    "2 cups flour",
    "1 cup sugar",
    "Mix dry ingredients.",
    "Bake at 350F.",
]

BANANA_BREAD_LINES = [
    "BANANA BREAD",
    "3 ripe bananas",
    "2 cups flour",
    "Mash the bananas.",
    "Bake for 60 minutes.",
]


@pytest.fixture
def make_stub_model():
    """Return a factory for StubLineModel instances."""
    return StubLineModel


@pytest.fixture
def cookie_lines():
    """Raw OCR lines of a single recipe."""
    return list(COOKIE_LINES)


@pytest.fixture
def two_recipe_lines():
    """Two recipes back to back, the second starting at index 5."""
    return list(COOKIE_LINES) + list(BANANA_BREAD_LINES)


@pytest.fixture
def rule_classifier():
    """Classifier backed by the rule-based line model."""
    return RecipeTextClassifier(RuleBasedLineModel())


@pytest.fixture
def make_fetcher():
    """
    Return a factory for fake fetchers.

    The fetcher records requested URLs on its `urls` attribute.
    """
    def factory(body, status=200):
        if isinstance(body, str):
            body = body.encode("utf-8")

        def fetcher(url):
            fetcher.urls.append(url)
            return status, body

        fetcher.urls = []
        return fetcher

    return factory


@pytest.fixture
def json_ld_recipe():
    """schema.org Recipe object with HowToStep instructions."""
    return {
        "@context": "https://schema.org",
        "@type": "Recipe",
        "name": "Classic Pancakes",
        "description": "Fluffy weekend pancakes.",
        "author": {"@type": "Person", "name": "Jane Baker"},
        "publisher": {"@type": "Organization", "name": "Weekend Kitchen"},
        "prepTime": "PT10M",
        "cookTime": "PT15M",
        "totalTime": "PT25M",
        "recipeYield": "4 servings",
        "recipeIngredient": [
            "1 1/2 cups flour",
            "2 tablespoons sugar",
            "1 cup milk, warmed",
        ],
        "recipeInstructions": [
            {"@type": "HowToStep", "text": "Whisk the dry ingredients."},
            {"@type": "HowToStep", "text": "Stir in the milk."},
            {"@type": "HowToStep", "text": "Cook on a hot griddle."},
        ],
    }


@pytest.fixture
def json_ld_html(json_ld_recipe):
    """Page with a JSON-LD Recipe and conflicting DOM lists."""
    return f"""
    <html>
    <head>
        <title>Pancakes | Weekend Kitchen</title>
        <script type="application/ld+json">{json.dumps(json_ld_recipe)}</script>
    </head>
    <body>
        <h1>Pancakes From The DOM</h1>
        <ul class="ingredients"><li>9 cups of something else</li></ul>
        <ol class="instructions"><li>Do the DOM thing.</li></ol>
    </body>
    </html>
    """


@pytest.fixture
def selector_html():
    """Page without structured data that uses common recipe CSS classes."""
    return """
    <html>
    <head>
        <title>Tomato Soup - Soup Site</title>
        <meta name="description" content="A quick weeknight soup.">
        <meta property="og:site_name" content="Soup Site">
    </head>
    <body>
        <h1>Tomato Soup</h1>
        <p class="byline">Sam Cook</p>
        <span class="recipe-yield">Serves 4</span>
        <ul class="ingredients">
            <li>2 cups tomatoes, chopped</li>
            <li>1 tsp salt</li>
            <li>  </li>
        </ul>
        <ol class="instructions">
            <li>Simmer the tomatoes for 20 minutes.</li>
            <li>Blend until smooth.</li>
        </ol>
    </body>
    </html>
    """


@pytest.fixture
def block_html():
    """Page with recipe content in plain paragraphs only."""
    return """
    <html>
    <head><title>Simple Dough</title></head>
    <body>
        <nav><p>Home | 2 cups of recipes | Contact</p></nav>
        <article>
            <p>2 cups flour</p>
            <p>1 teaspoon salt</p>
            <p>Mix the flour and salt in a large bowl.</p>
            <p>Knead the dough and bake for 30 minutes.</p>
        </article>
        <footer><p>Add your own comments below, stir up a discussion.</p></footer>
    </body>
    </html>
    """
