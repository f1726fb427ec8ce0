"""Tests for normalization, skill extraction and scoring."""
import pytest

from matching.extractor import derive_required_skills, extract
from matching.normalizer import joined, normalize
from matching.scorer import MatchScore, score, score_band
from matching.vocabulary import SkillVocabulary


class TestNormalize:
    """Tests for normalize."""

    def test_lowercases_and_splits(self):
        assert normalize("I know Python, SQL & AWS!") == ["i", "know", "python", "sql", "aws"]

    def test_punctuation_is_a_separator(self):
        assert normalize("Node.js / Vue.js") == ["node", "js", "vue", "js"]

    @pytest.mark.parametrize("text", ["", "   ", "\n\t", None])
    def test_empty_input(self, text):
        assert normalize(text) == []

    def test_deterministic(self):
        text = "Spring Boot; REST APIs -- PostgreSQL"
        assert normalize(text) == normalize(text)
        assert joined(text) == "spring boot rest apis postgresql"


class TestExtract:
    """Tests for extract."""

    def test_finds_mentioned_terms(self):
        found = extract("I know Python and AWS well", {"Python", "AWS", "Java"})
        assert found == {"Python", "AWS"}

    def test_empty_text(self, vocabulary):
        assert extract("", vocabulary) == set()

    def test_empty_vocabulary(self):
        assert extract("Python everywhere", set()) == set()

    def test_keeps_canonical_spelling(self, vocabulary):
        found = extract("built services with node.js and vue.js", vocabulary)
        assert "Node.js" in found
        assert "Vue.js" in found

    def test_punctuation_variants_match(self):
        vocab = {"Node.js", "REST APIs"}
        assert extract("Node JS, rest-apis", vocab) == vocab

    def test_substring_policy_matches_inside_words(self):
        # known limitation: Java is found inside JavaScript
        assert extract("JavaScript developer", {"Java", "JavaScript"}) == {"Java", "JavaScript"}

    def test_word_boundary_option(self):
        found = extract("JavaScript developer", {"Java", "JavaScript"}, word_boundary=True)
        assert found == {"JavaScript"}

    def test_term_without_tokens_is_ignored(self):
        assert extract("anything at all", {"++", "Python"}) == set()

    def test_symbol_terms_need_their_symbols(self):
        found = extract("Docker and Python on AWS", {"C++", "C#", "Python"})
        assert found == {"Python"}

    def test_symbol_terms_are_found(self):
        found = extract("Senior c++ engineer, some C# too", {"C++", "C#", "Go"})
        assert found == {"C++", "C#"}

    def test_symbol_terms_with_word_boundary(self):
        vocab = {"C++", "C#"}
        assert extract("Worked in C++/Qt and C#.", vocab, word_boundary=True) == {"C++", "C#"}
        assert extract("ABC++ toolkit", vocab, word_boundary=True) == set()

    def test_accepts_vocabulary_object(self):
        vocab = SkillVocabulary(["Docker", "Git"])
        assert extract("Docker and git daily", vocab) == {"Docker", "Git"}

    def test_derive_required_skills(self, vocabulary):
        content = "Looking for a React developer with SQL and Docker experience."
        assert derive_required_skills(content, vocabulary) == {"React", "SQL", "Docker"}


class TestScore:
    """Tests for score."""

    def test_half_match(self):
        result = score({"Python", "SQL"}, {"Python"})
        assert result == MatchScore(score=50, matched=frozenset({"Python"}), missing=frozenset({"SQL"}))

    def test_empty_requirements_is_full_match(self):
        result = score(set(), {"Python", "AWS"})
        assert result.score == 100
        assert result.matched == frozenset()
        assert result.missing == frozenset()

    def test_no_candidate_skills(self):
        result = score({"Python", "SQL"}, set())
        assert result.score == 0
        assert result.missing == {"Python", "SQL"}

    def test_two_of_three_rounds_to_67(self):
        assert score({"React", "Node.js", "SQL"}, {"React", "SQL"}).score == 67

    def test_halves_round_up(self):
        required = {f"skill{i}" for i in range(8)}
        assert score(required, {"skill0"}).score == 13

    def test_case_insensitive_and_reports_required_spelling(self):
        result = score({"PostgreSQL"}, {"postgresql"})
        assert result.matched == {"PostgreSQL"}
        assert result.score == 100

    def test_extra_candidate_skills_are_ignored(self):
        result = score({"SQL"}, {"SQL", "Docker", "Git"})
        assert result.matched == {"SQL"}
        assert result.missing == frozenset()

    @pytest.mark.parametrize("required,candidate", [
        ({"A", "B", "C"}, {"B", "D"}),
        ({"A"}, set()),
        ({"A", "B"}, {"A", "B"}),
        (set(), {"A"}),
        ({"Python", "AWS", "SQL", "Git"}, {"python", "git", "Rust"}),
    ])
    def test_partition_covers_requirements(self, required, candidate):
        result = score(required, candidate)
        assert result.matched | result.missing == required
        assert not result.matched & result.missing
        assert 0 <= result.score <= 100


class TestScoreBand:
    """Tests for score_band."""

    @pytest.mark.parametrize("value,band", [
        (100, "excellent"), (80, "excellent"), (79, "good"), (60, "good"), (59, "poor"), (0, "poor"),
    ])
    def test_bands(self, value, band):
        assert score_band(value) == band


class TestSkillVocabulary:
    """Tests for SkillVocabulary."""

    def test_default_contains_common_skills(self, vocabulary):
        assert "Python" in vocabulary
        assert "Spring Boot" in vocabulary
        assert len(vocabulary) == 22

    def test_case_duplicates_collapse(self):
        vocab = SkillVocabulary(["Python", "python", " SQL ", ""])
        assert vocab.terms == frozenset({"Python", "SQL"})

    def test_iteration_is_sorted(self):
        assert list(SkillVocabulary(["sql", "AWS", "Docker"])) == ["AWS", "Docker", "sql"]

    def test_from_file(self, tmp_path):
        path = tmp_path / "skills.txt"
        path.write_text("# languages\nPython\nGo  # short name\n\nKafka\n", encoding="utf-8")
        assert SkillVocabulary.from_file(path).terms == frozenset({"Python", "Go", "Kafka"})

    def test_from_file_keeps_hash_inside_terms(self, tmp_path):
        path = tmp_path / "skills.txt"
        path.write_text("C#  # dotnet\nF#\n", encoding="utf-8")
        assert SkillVocabulary.from_file(path).terms == frozenset({"C#", "F#"})

    def test_from_settings(self, tmp_path):
        from config import Settings

        assert SkillVocabulary.from_settings(Settings()) == SkillVocabulary.default()
        assert SkillVocabulary.from_settings(Settings(vocabulary=["Rust"])).terms == {"Rust"}
        path = tmp_path / "skills.txt"
        path.write_text("Elixir\n", encoding="utf-8")
        settings = Settings(vocabulary=["Rust"], vocabulary_file=str(path))
        assert SkillVocabulary.from_settings(settings).terms == {"Elixir"}

    def test_immutable(self, vocabulary):
        with pytest.raises(AttributeError):
            vocabulary.extra = 1
