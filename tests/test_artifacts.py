"""Tests for summary, key points, quotes, claims and the rule-based result."""

from newsverify.artifacts import (
    EXPLANATIONS,
    FINAL_VERDICTS,
    analyze_claims,
    extract_quotes,
    generate_artifacts,
    key_points,
    positive_indicators,
    red_flags,
    rule_based_analysis,
    summarize,
)
from newsverify.models import ArticleData, Verdict

from conftest import ARTICLE_TEXT

PLAIN = (
    "The library extended its weekend opening hours. "
    "Volunteers repainted the reading room in two days. "
    "A new children's corner opened on the ground floor. "
    "Parking near the entrance remains limited during events. "
    "Membership cards can now be renewed online."
)


class TestSummary:
    def test_first_three_sentences_with_trailing_period(self):
        assert summarize(PLAIN) == (
            "The library extended its weekend opening hours. "
            "Volunteers repainted the reading room in two days. "
            "A new children's corner opened on the ground floor."
        )

    def test_no_trailing_period_when_nothing_was_cut(self):
        content = "The library extended its weekend opening hours. Volunteers repainted the reading room."
        assert summarize(content) == (
            "The library extended its weekend opening hours. Volunteers repainted the reading room"
        )

    def test_skips_trivial_sentences(self):
        assert summarize("Hi. Ok. Fine.") == ""


class TestKeyPoints:
    def test_indicator_sentences_first(self):
        points = key_points(ARTICLE_TEXT)
        assert points[0].startswith("According to officials")
        assert points[1].startswith("A study found")
        assert points[2].startswith("Experts say")
        assert len(points) == 3

    def test_padding_without_duplicates(self):
        content = "According to the mayor, the bridge is safe. " + PLAIN
        points = key_points(content)
        assert len(points) == 4
        assert points[0] == "According to the mayor, the bridge is safe"
        assert len(set(points)) == 4

    def test_never_more_than_four(self):
        content = " ".join(f"According to source number {i}, nothing changed." for i in range(10))
        assert len(key_points(content)) == 4

    def test_short_article_is_not_padded_with_invented_text(self):
        assert key_points("Only one meaningful sentence lives here.") == [
            "Only one meaningful sentence lives here"
        ]


class TestQuotes:
    def test_extracts_at_most_two(self):
        content = (
            'She said "the budget will be balanced by next year" and added '
            '"we have no plans to raise local taxes at all" before noting '
            '"the council will vote on this in the spring".'
        )
        assert extract_quotes(content) == [
            "the budget will be balanced by next year",
            "we have no plans to raise local taxes at all",
        ]

    def test_ignores_short_quotes(self):
        assert extract_quotes('He said "no comment" and left.') == []

    def test_no_placeholder_quotes(self):
        assert extract_quotes(PLAIN) == []


class TestClaims:
    def test_prefers_reporting_sentence(self):
        claims = analyze_claims(ARTICLE_TEXT, 80)
        assert len(claims) == 1
        assert claims[0].claim == "According to officials, the new transit line will open next spring"
        assert claims[0].verdict == Verdict.TRUE

    def test_verdict_follows_score_bands(self):
        assert analyze_claims(PLAIN, 70)[0].verdict == Verdict.TRUE
        assert analyze_claims(PLAIN, 69)[0].verdict == Verdict.MISLEADING
        assert analyze_claims(PLAIN, 40)[0].verdict == Verdict.MISLEADING
        assert analyze_claims(PLAIN, 39)[0].verdict == Verdict.FALSE

    def test_falls_back_to_first_sentence(self):
        assert analyze_claims(PLAIN, 50)[0].claim == "The library extended its weekend opening hours"

    def test_short_content_still_has_a_claim(self):
        assert analyze_claims("Rain today", 50)[0].claim == "Rain today"

    def test_empty_content_has_no_claim(self):
        assert analyze_claims("", 50) == []


class TestFlags:
    def test_red_flags(self):
        flags = red_flags("Shocking secret revealed!")
        assert "Contains sensational language" in flags
        assert "Uses conspiracy-style language" in flags
        assert "Very short content length" in flags
        assert "Limited sentence structure" in flags

    def test_positive_indicators(self):
        found = positive_indicators(ARTICLE_TEXT + " " + PLAIN)
        assert "References external sources" in found
        assert "Mentions research or data" in found
        assert "Cites expert opinions" in found
        assert "Appropriate content length" in found
        assert "Well-structured content" in found


class TestGenerateArtifacts:
    def test_templates_follow_band(self):
        assert generate_artifacts(PLAIN, 85).explanation == EXPLANATIONS["credible"]
        assert generate_artifacts(PLAIN, 55).final_verdict == FINAL_VERDICTS["mixed"]
        assert generate_artifacts(PLAIN, 10).final_verdict.startswith("QUESTIONABLE")

    def test_rule_based_analysis(self):
        article = ArticleData(title="Long read", content=PLAIN * 20, source_url="https://apnews.com/a")
        result = rule_based_analysis(article)
        assert result.url == "https://apnews.com/a"
        assert result.title == "Long read"
        assert len(result.content) == 1000
        assert 0 <= result.credibility_score <= 100
        assert len(result.key_points) <= 4
        assert len(result.quotes) <= 2
        assert result.claims
        assert [s.name for s in result.verification_sources] == [
            "Reuters Fact Check", "Associated Press", "Snopes", "PolitiFact",
        ]
