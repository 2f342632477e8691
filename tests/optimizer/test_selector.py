"""Tests for optimization and best-article selection."""

import pytest

from src.common.exceptions import NoArticlesError
from src.common.models import WriterName
from src.optimizer.selector import (
    add_internal_links,
    generate_meta_description,
    optimize_article,
    product_slug,
    rank_articles,
    select_best,
)
from src.writers.models import GeneratedArticle


def _article(content: str, writer: WriterName) -> GeneratedArticle:
    return GeneratedArticle.from_content("Tytuł", content, writer)


class TestMetaDescription:
    def test_first_two_sentences(self):
        html = "<h2>Wstęp</h2><p>Pierwsze zdanie. Drugie zdanie! Trzecie zdanie.</p>"
        assert generate_meta_description(html) == "Wstęp Pierwsze zdanie. Drugie zdanie"

    def test_single_sentence(self):
        assert generate_meta_description("<p>Tylko jedno</p>") == "Tylko jedno."

    def test_truncated_with_ellipsis(self):
        long_sentence = " ".join(["słowo"] * 60)
        meta = generate_meta_description(f"<p>{long_sentence}.</p>")
        assert len(meta) == 160
        assert meta.endswith("...")

    def test_empty_content(self):
        assert generate_meta_description("<p> </p>") == ""


class TestInternalLinks:
    def test_slug(self):
        assert product_slug(" SVG  100 ") == "svg-100"

    def test_first_occurrence_only(self):
        html = "<p>Kompensator SVG 100 działa. SVG 100 jest tani.</p>"
        linked_html, linked = add_internal_links(html, ["SVG 100"])
        assert linked == ["SVG 100"]
        assert linked_html.count('href="/products/svg-100"') == 1
        assert 'Kompensator <a href="/products/svg-100">SVG 100</a> działa' in linked_html

    def test_whole_word_match(self):
        _, linked = add_internal_links("<p>Model SVG 1000 jest nowy.</p>", ["SVG 100"])
        assert linked == []

    def test_attributes_and_existing_links_are_skipped(self):
        html = '<p><img alt="SVG 100"> <a href="/x">SVG 100</a> oraz SVG 100</p>'
        linked_html, linked = add_internal_links(html, ["SVG 100"])
        assert linked == ["SVG 100"]
        assert '<img alt="SVG 100">' in linked_html
        assert '<a href="/x">SVG 100</a>' in linked_html
        assert linked_html.endswith('oraz <a href="/products/svg-100">SVG 100</a></p>')

    def test_later_product_not_matched_inside_earlier_link(self):
        html = "<p>SVG 100 i SVG</p>"
        linked_html, linked = add_internal_links(html, ["SVG 100", "SVG"])
        assert linked == ["SVG 100", "SVG"]
        assert linked_html == (
            '<p><a href="/products/svg-100">SVG 100</a> i '
            '<a href="/products/svg">SVG</a></p>'
        )

    def test_optimize_keeps_original_content(self):
        article = _article("<p>Kup SVG 100 dziś.</p>", WriterName.GEMINI)
        optimized = optimize_article(article, ["svg"], related_products=["SVG 100"])
        assert optimized.content == "<p>Kup SVG 100 dziś.</p>"
        assert "/products/svg-100" in optimized.optimized_content
        assert optimized.internal_links == ("SVG 100",)
        assert optimized.meta_description == "Kup SVG 100 dziś."


class TestRanking:
    def test_higher_score_first(self, seo_article_html):
        weak = _article("<p>Krótko.</p>", WriterName.GEMINI)
        strong = _article(seo_article_html, WriterName.CLAUDE)
        ranked = rank_articles([weak, strong], ["x", "y"])
        assert [r.writer for r in ranked] == [WriterName.CLAUDE, WriterName.GEMINI]
        assert ranked[0].score.total_score == 82

    def test_ties_keep_input_order(self):
        same = "<h2>A</h2><p>Jednakowa treść artykułu.</p>"
        articles = [
            _article(same, WriterName.GEMINI),
            _article(same, WriterName.CHATGPT),
            _article(same, WriterName.CLAUDE),
        ]
        best = select_best(articles, ["treść"])
        assert best.writer == WriterName.GEMINI
        ranked = rank_articles(list(reversed(articles)), ["treść"])
        assert ranked[0].writer == WriterName.CLAUDE

    def test_select_best_empty(self):
        with pytest.raises(NoArticlesError):
            select_best([], ["moc"])
